from __future__ import annotations

import math
import wave
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SOUNDS = ROOT / "resources" / "sounds"


def write_chime(path: Path, tones: list[tuple[float, float]], volume: float = 0.35, sample_rate: int = 44100) -> None:
    """Concatenated sine tones, each (freq_hz, duration_s), with a soft envelope per tone."""
    path.parent.mkdir(parents=True, exist_ok=True)

    with wave.open(str(path), "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)  # 16-bit
        wf.setframerate(sample_rate)

        frames = bytearray()
        for freq_hz, duration_s in tones:
            n = int(sample_rate * duration_s)
            for i in range(n):
                t = i / sample_rate
                env = 1.0
                attack = 0.01
                decay = 0.06
                if t < attack:
                    env = t / attack
                elif t > duration_s - decay:
                    env = max(0.0, (duration_s - t) / decay)
                s = math.sin(2.0 * math.pi * freq_hz * t) * volume * env
                v = int(max(-1.0, min(1.0, s)) * 32767)
                frames += int(v).to_bytes(2, byteorder="little", signed=True)

        wf.writeframes(frames)


def main() -> None:
    alert = SOUNDS / "alert.wav"

    if not alert.exists():
        write_chime(alert, [(660.0, 0.14), (990.0, 0.22)])
        print(f"generated: {alert}")

    if alert.exists():
        print("sounds OK")


if __name__ == "__main__":
    main()
