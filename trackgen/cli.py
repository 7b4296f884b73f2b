from __future__ import annotations

import argparse
from pathlib import Path

from .audio import read_wav_header
from .config import settings
from .container import get_preset_repo, get_track_service
from .errors import TrackGenError
from .logging_utils import get_logger
from .models import MAX_SAMPLE_RATE_HZ, GeneratedTrack, TrackKind


logger = get_logger(__name__)


def _write_track(track: GeneratedTrack, out_path: Path) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(track.data)
    logger.info("Wrote %s (%d bytes, %s)", out_path, len(track.data), track.media_type)


def _cmd_presets(args: argparse.Namespace) -> int:
    for preset in get_preset_repo().list_presets():
        print(
            f"{preset.name}\t{preset.kind.value}\t{preset.frequency:g}\t"
            f"{preset.duration_s:g}s\t{preset.description}"
        )
    return 0


def _cmd_render(args: argparse.Namespace) -> int:
    service = get_track_service()
    if args.preset:
        track = service.generate_preset(args.preset, sample_rate_hz=args.sample_rate)
    else:
        track = service.generate_sample_track(
            args.name,
            args.kind,
            args.frequency,
            args.duration,
            sample_rate_hz=args.sample_rate,
        )
    out_path = Path(args.out) if args.out else Path(track.filename)
    _write_track(track, out_path)
    return 0


def _cmd_render_all(args: argparse.Namespace) -> int:
    service = get_track_service()
    out_dir = Path(args.out_dir)
    for preset in get_preset_repo().list_presets():
        track = service.generate_preset(preset.name, sample_rate_hz=args.sample_rate)
        _write_track(track, out_dir / track.filename)
    return 0


def _cmd_inspect(args: argparse.Namespace) -> int:
    data = Path(args.path).read_bytes()
    header = read_wav_header(data)
    frames = header["data_size"] // header["block_align"]
    print(f"channels={header['num_channels']}")
    print(f"sample_rate={header['sample_rate']}")
    print(f"bits_per_sample={header['bits_per_sample']}")
    print(f"frames={frames}")
    print(f"duration_s={frames / header['sample_rate']:.3f}")
    return 0


def _sample_rate(value: str) -> int:
    try:
        rate = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid sample rate {value!r}") from exc
    if not 0 < rate <= MAX_SAMPLE_RATE_HZ:
        raise argparse.ArgumentTypeError(
            f"sample rate must be in (0, {MAX_SAMPLE_RATE_HZ}], got {rate}"
        )
    return rate


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="trackgen sample-track CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    p_presets = sub.add_parser("presets", help="List the preset catalog")
    p_presets.set_defaults(func=_cmd_presets)

    p_render = sub.add_parser("render", help="Render one track to a .wav file")
    p_render.add_argument("--preset", default=None, help="Preset name, e.g. 'Bass Drop'")
    p_render.add_argument(
        "--kind", default=None, choices=[k.value for k in TrackKind], help="Waveform kind or drum"
    )
    p_render.add_argument("--frequency", type=float, default=None, help="Hz, or BPM for drum")
    p_render.add_argument("--duration", type=float, default=None, help="Duration in seconds")
    p_render.add_argument("--name", default="track", help="Track name used for the default filename")
    p_render.add_argument("--out", default=None, help="Output path (defaults to '<name>.wav')")
    p_render.add_argument(
        "--sample-rate", type=_sample_rate, default=settings.sample_rate_hz, help="Sample rate in Hz"
    )
    p_render.set_defaults(func=_cmd_render)

    p_all = sub.add_parser("render-all", help="Render every preset into a directory")
    p_all.add_argument("--out-dir", required=True, help="Output directory")
    p_all.add_argument(
        "--sample-rate", type=_sample_rate, default=settings.sample_rate_hz, help="Sample rate in Hz"
    )
    p_all.set_defaults(func=_cmd_render_all)

    p_inspect = sub.add_parser("inspect", help="Print the header of a .wav file")
    p_inspect.add_argument("path", help="Path to a .wav file")
    p_inspect.set_defaults(func=_cmd_inspect)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "render" and not args.preset and None in (
        args.kind,
        args.frequency,
        args.duration,
    ):
        parser.error("render needs --preset or all of --kind/--frequency/--duration")
    try:
        return args.func(args)
    except TrackGenError as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
