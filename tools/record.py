"""
Flock Offline Recorder
======================

Runs a flock preset headless and saves bird positions and orientations
for every recorded frame.

Usage:
    python -m tools.record                          # Record the reference preset
    python -m tools.record --preset murmuration     # Record a named preset
    python -m tools.record --preset 3               # Record preset [3] from the menu
    python -m tools.record --frames 300 --seed 7    # Override length and seed
    python -m tools.record --resume reference       # Continue an interrupted session
    python -m tools.record --status reference       # Check recording status
    python -m tools.record --list                   # List all recordings
    python -m tools.record --presets                # Show the preset menu
    python -m tools.record --compress               # zstd-compress frames when done

Output:
    recordings/<session_name>/
        metadata.json     - Preset, seed and steering parameters
        frame_0000.npz    - positions, quaternions (x, y, z, w), flock indices
        frame_0000.zstd   - Same data, zstd-compressed (after --compress)
        ...

A session replays deterministically from its seed, so resuming re-runs the
simulation up to the last saved frame rather than storing full state.
"""

import sys
import json
import time
import struct
import argparse
import numpy as np
import zstandard as zstd
from datetime import datetime
from pathlib import Path

from boids import FlockingParams, Simulation
from tools.presets import get_preset_by_index, get_preset_config, print_preset_menu

# Get project root (parent of tools/)
PROJECT_ROOT = Path(__file__).parent.parent
RECORDINGS_DIR = PROJECT_ROOT / "recordings"

# Per-frame arrays and their on-disk dtypes
FRAME_ARRAYS = (
    ("positions", np.float32),
    ("quaternions", np.float32),
    ("flock_indices", np.int32),
)


def get_recording_dir(session_name: str, base: Path = None) -> Path:
    """Get (and create) the directory for a recording session."""
    rec_dir = (RECORDINGS_DIR if base is None else Path(base)) / session_name
    rec_dir.mkdir(parents=True, exist_ok=True)
    return rec_dir


def save_metadata(rec_dir: Path, config: dict, start_time: float):
    """Save recording metadata."""
    metadata = {
        **config,
        "start_time": start_time,
        "start_datetime": datetime.fromtimestamp(start_time).isoformat(),
    }
    with open(rec_dir / "metadata.json", "w") as f:
        json.dump(metadata, f, indent=2)


def load_metadata(rec_dir: Path) -> dict:
    """Load recording metadata."""
    with open(rec_dir / "metadata.json", "r") as f:
        return json.load(f)


def get_completed_frames(rec_dir: Path) -> int:
    """Count consecutive frames saved from frame 0."""
    count = 0
    # Uncompressed .npz (during recording) or compressed .zstd (after compression)
    while (rec_dir / f"frame_{count:04d}.npz").exists() or (rec_dir / f"frame_{count:04d}.zstd").exists():
        count += 1
    return count


def clear_frames(rec_dir: Path) -> int:
    """Delete every saved frame of a session, compressed or not."""
    stale = sorted(rec_dir.glob("frame_*.npz")) + sorted(rec_dir.glob("frame_*.zstd"))
    for frame_file in stale:
        frame_file.unlink()
    if stale:
        print(f"[Record] Removed {len(stale)} frames from a previous run")
    return len(stale)


def save_frame(rec_dir: Path, frame_idx: int, simulation: Simulation):
    """Save the simulation's current bird poses as one frame."""
    np.savez(
        rec_dir / f"frame_{frame_idx:04d}.npz",
        positions=simulation.positions().astype(np.float32),
        quaternions=simulation.quaternions().astype(np.float32),
        flock_indices=simulation.flock_indices(),
        tick=np.int64(simulation.ticks),
    )


def load_frame(rec_dir: Path, frame_idx: int) -> dict:
    """
    Load a single frame from disk.

    Returns:
        dict with positions (n, 3), quaternions (n, 4), flock_indices (n,), tick

    Raises:
        FileNotFoundError: The frame has not been recorded
    """
    zstd_file = rec_dir / f"frame_{frame_idx:04d}.zstd"
    if zstd_file.exists():
        with open(zstd_file, "rb") as f:
            return decompress_frame(f.read())

    frame_file = rec_dir / f"frame_{frame_idx:04d}.npz"
    if not frame_file.exists():
        raise FileNotFoundError(f"Frame {frame_idx:04d} not found in {rec_dir}")

    with np.load(frame_file) as data:
        return {
            "positions": data["positions"].copy(),
            "quaternions": data["quaternions"].copy(),
            "flock_indices": data["flock_indices"].copy(),
            "tick": int(data["tick"]),
        }


# =============================================================================
# COMPRESSION
# =============================================================================

FRAME_FORMAT = 1


def compress_frame(frame: dict) -> bytes:
    """
    Compress one frame with zstd.

    Format:
    - 1 byte: compression format (1 = zstd absolute)
    - 8 bytes: tick
    - per array in FRAME_ARRAYS: 4 bytes compressed size, then the data
    """
    cctx = zstd.ZstdCompressor(level=19, threads=1)

    result = struct.pack("<Bq", FRAME_FORMAT, int(frame["tick"]))
    for key, dtype in FRAME_ARRAYS:
        data = cctx.compress(np.ascontiguousarray(frame[key], dtype=dtype).tobytes())
        result += struct.pack("<I", len(data))
        result += data
    return result


def decompress_frame(data: bytes) -> dict:
    """Inverse of compress_frame."""
    if len(data) < 9:
        raise ValueError("Invalid compressed frame")

    comp_format, tick = struct.unpack("<Bq", data[:9])
    if comp_format != FRAME_FORMAT:
        raise ValueError(f"Unknown compression format: {comp_format}")

    dctx = zstd.ZstdDecompressor()
    frame = {"tick": tick}
    offset = 9
    for key, dtype in FRAME_ARRAYS:
        size = struct.unpack("<I", data[offset:offset + 4])[0]
        offset += 4
        frame[key] = np.frombuffer(dctx.decompress(data[offset:offset + size]), dtype=dtype).copy()
        offset += size

    frame["positions"] = frame["positions"].reshape(-1, 3)
    frame["quaternions"] = frame["quaternions"].reshape(-1, 4)
    return frame


def compress_recording(rec_dir: Path) -> tuple:
    """
    Replace every .npz frame of a session with a .zstd frame.

    Returns:
        (original bytes, compressed bytes)
    """
    original = 0
    compressed = 0
    for npz_file in sorted(rec_dir.glob("frame_*.npz")):
        frame_idx = int(npz_file.stem.split("_")[1])
        with np.load(npz_file) as data:
            frame = {key: data[key].copy() for key, _ in FRAME_ARRAYS}
            frame["tick"] = int(data["tick"])

        payload = compress_frame(frame)
        with open(rec_dir / f"frame_{frame_idx:04d}.zstd", "wb") as f:
            f.write(payload)

        original += npz_file.stat().st_size
        compressed += len(payload)
        npz_file.unlink()

    if original:
        print(f"[Compress] {format_bytes(original)} -> {format_bytes(compressed)} "
              f"({compressed / original * 100:.0f}%)")
    return original, compressed


def format_bytes(size: float) -> str:
    for unit in ("B", "KB", "MB"):
        if size < 1024:
            return f"{size:.0f}{unit}" if unit == "B" else f"{size:.1f}{unit}"
        size /= 1024
    return f"{size:.1f}GB"


def create_simulation(config: dict) -> Simulation:
    """Build and populate the simulation described by a recording config."""
    params = FlockingParams.from_config(**config.get("params", {}))
    simulation = Simulation(
        params=params,
        num_flocks=config["num_flocks"],
        birds_per_flock=config["birds_per_flock"],
        seed=config["seed"],
        use_numba=config.get("use_numba", True),
    )
    simulation.populate()
    return simulation


def format_time(seconds: float) -> str:
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(int(seconds), 60)
    if minutes < 60:
        return f"{minutes}m {secs:02d}s"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes:02d}m"


def print_progress(frame: int, total: int, elapsed: float):
    width = 40
    done = (frame + 1) / total
    filled = int(width * done)
    bar = "█" * filled + "░" * (width - filled)
    sys.stdout.write(f"\r[Record] {bar} {frame + 1}/{total} ({done * 100:5.1f}%) {format_time(elapsed)}")
    sys.stdout.flush()


def record(config: dict, resume: bool = False, base: Path = None, quiet: bool = False,
           compress: bool = False) -> Path:
    """
    Record a session.

    Args:
        config: Preset config with session_name, num_flocks, birds_per_flock,
            params, total_frames, ticks_per_frame and optionally seed
        resume: Continue after the last saved frame of an existing session
        base: Directory holding recordings (defaults to <project>/recordings)
        quiet: Suppress the progress bar
        compress: zstd-compress the frames once recording completes

    Returns:
        The session directory
    """
    rec_dir = get_recording_dir(config["session_name"], base)
    start_frame = 0

    if resume and (rec_dir / "metadata.json").exists():
        saved = load_metadata(rec_dir)
        saved["total_frames"] = max(saved["total_frames"], config.get("total_frames", 0))
        config = saved
        start_frame = get_completed_frames(rec_dir)
        print(f"[Record] Found {start_frame} completed frames")
    else:
        if config.get("seed") is None:
            config = {**config, "seed": int(np.random.SeedSequence().entropy % (2 ** 32))}
        print(f"[Record] Starting new recording: {config['session_name']}")
        clear_frames(rec_dir)
        save_metadata(rec_dir, config, time.time())

    total_frames = config["total_frames"]
    ticks_per_frame = config.get("ticks_per_frame", 1)

    simulation = create_simulation(config)
    print(f"[Record] Birds: {simulation.num_birds}, frames: {total_frames}, "
          f"ticks/frame: {ticks_per_frame}, seed: {config['seed']}")

    if start_frame > 0:
        print(f"[Record] Replaying {start_frame} frames to resume...")
        simulation.run((start_frame - 1) * ticks_per_frame)

    start_time = time.time()
    frame = start_frame
    try:
        for frame in range(start_frame, total_frames):
            if frame > 0:
                simulation.run(ticks_per_frame)
            save_frame(rec_dir, frame, simulation)
            if not quiet:
                print_progress(frame, total_frames, time.time() - start_time)
    except KeyboardInterrupt:
        print(f"\n[Record] Paused at frame {frame}")
        print(f"[Record] To resume: python -m tools.record --resume {config['session_name']}")
        return rec_dir

    if not quiet:
        print()
    print(f"[Record] Recording complete in {format_time(time.time() - start_time)}")
    if compress:
        compress_recording(rec_dir)
    print(f"[Record] Output: {rec_dir}")
    print(f"[Record] To playback: python -m tools.playback {config['session_name']}")
    return rec_dir


def show_status(session_name: str, base: Path = None):
    """Show recording status for a specific session."""
    rec_dir = (RECORDINGS_DIR if base is None else Path(base)) / session_name
    if not (rec_dir / "metadata.json").exists():
        print(f"[Record] No recording named '{session_name}'")
        return

    metadata = load_metadata(rec_dir)
    completed = get_completed_frames(rec_dir)
    total = metadata["total_frames"]
    state = "complete" if completed >= total else "incomplete"

    print(f"[Record] {session_name}: {completed}/{total} frames ({state})")
    print(f"[Record] Preset: {metadata.get('preset', '?')}, seed: {metadata['seed']}, "
          f"started {metadata.get('start_datetime', '?')}")


def list_recordings(base: Path = None):
    """List all recordings."""
    root = RECORDINGS_DIR if base is None else Path(base)
    sessions = sorted(p for p in root.glob("*") if (p / "metadata.json").exists()) if root.exists() else []

    if not sessions:
        print("[Record] No recordings found")
        return

    for rec_dir in sessions:
        metadata = load_metadata(rec_dir)
        completed = get_completed_frames(rec_dir)
        print(f"  {rec_dir.name:<24} {completed:>5}/{metadata['total_frames']:<5} frames  "
              f"preset={metadata.get('preset', '?')}")


def resolve_preset(choice: str) -> dict:
    """Preset config for a key or a --presets menu index, or None if unknown."""
    if choice.isdigit():
        key, _ = get_preset_by_index(int(choice))
        if key is None:
            return None
        choice = key
    return get_preset_config(choice)


def main():
    parser = argparse.ArgumentParser(description="Flock offline recorder")
    parser.add_argument("session", nargs="?", help="Session name (for --resume or --status)")
    parser.add_argument("--preset", type=str, default="reference", help="Preset key or menu index (see --presets)")
    parser.add_argument("--frames", "-f", type=int, help="Override number of frames")
    parser.add_argument("--every", type=int, help="Simulation ticks between saved frames")
    parser.add_argument("--seed", type=int, help="Seed for flock placement")
    parser.add_argument("--name", type=str, help="Session name for a new recording")
    parser.add_argument("--python", action="store_true", help="Use the pure-Python sweep instead of Numba")
    parser.add_argument("--resume", action="store_true", help="Resume interrupted recording")
    parser.add_argument("--status", action="store_true", help="Show recording status")
    parser.add_argument("--list", action="store_true", help="List all recordings")
    parser.add_argument("--presets", action="store_true", help="Show available presets")
    parser.add_argument("--compress", action="store_true", help="zstd-compress frames after recording")
    args = parser.parse_args()

    if args.presets:
        print_preset_menu()
        return
    if args.list:
        list_recordings()
        return
    if args.status:
        if not args.session:
            parser.error("--status needs a session name")
        show_status(args.session)
        return

    config = resolve_preset(args.preset)
    if config is None:
        parser.error(f"Unknown preset '{args.preset}'")

    if args.frames is not None:
        config["total_frames"] = args.frames
    if args.every is not None:
        config["ticks_per_frame"] = args.every
    if args.seed is not None:
        config["seed"] = args.seed
    if args.python:
        config["use_numba"] = False
    config["session_name"] = args.session or args.name or config["session_name"]

    record(config, resume=args.resume, compress=args.compress)


if __name__ == "__main__":
    main()
