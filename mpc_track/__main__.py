"""
mpc_track package entry point.

Allows running mpc_track as a module:
    python -m mpc_track resample --trajectory path.csv --dt 0.1 --steps 20
"""

from mpc_track.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
