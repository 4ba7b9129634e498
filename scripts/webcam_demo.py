from __future__ import annotations

import argparse
import os
import sys
import time

import cv2

# Allow running without installing the package (repo-local usage).
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC_ROOT = os.path.join(REPO_ROOT, "src")
if SRC_ROOT not in sys.path:
    sys.path.insert(0, SRC_ROOT)

from ghosthand.camera import VideoSource  # noqa: E402
from ghosthand.config import GhostRenderSettings  # noqa: E402
from ghosthand.detector import create_hand_tracker  # noqa: E402
from ghosthand.drawing import draw_text  # noqa: E402
from ghosthand.log import setup_logging  # noqa: E402
from ghosthand.renderer import FrameRenderer  # noqa: E402


def add_render_args(ap: argparse.ArgumentParser) -> None:
    d = GhostRenderSettings()
    ap.add_argument("--body-opacity", type=float, default=d.body_opacity)
    ap.add_argument("--halo-opacity", type=float, default=d.halo_opacity)
    ap.add_argument("--blur-sigma", type=float, default=d.blur_sigma)
    ap.add_argument("--smoothing-alpha", type=float, default=d.smoothing_alpha)
    ap.add_argument("--landmark-size", type=int, default=d.landmark_size)
    ap.add_argument("--show-landmarks", action="store_true", help="Draw landmark markers")
    ap.add_argument("--show-labels", action="store_true", help="Draw handedness labels")
    ap.add_argument("--no-ghost", action="store_true", help="Start with the ghost overlay disabled")


def settings_from_args(args: argparse.Namespace) -> GhostRenderSettings:
    return GhostRenderSettings(
        enable_ghost_style=not args.no_ghost,
        show_landmarks=args.show_landmarks,
        show_handedness_label=args.show_labels,
        body_opacity=args.body_opacity,
        halo_opacity=args.halo_opacity,
        blur_sigma=args.blur_sigma,
        landmark_size=args.landmark_size,
        smoothing_alpha=args.smoothing_alpha,
    )


def main() -> int:
    ap = argparse.ArgumentParser(description="Webcam ghost-hand overlay demo.")
    ap.add_argument("--camera", type=int, default=0, help="Camera index (default: 0)")
    ap.add_argument("--width", type=int, default=1280, help="Capture width (best effort)")
    ap.add_argument("--height", type=int, default=720, help="Capture height (best effort)")
    ap.add_argument("--fps", type=int, default=60, help="Capture rate (best effort)")
    ap.add_argument("--max-hands", type=int, default=2, help="Maximum number of hands to track")
    ap.add_argument("--backend", choices=["auto", "mediapipe", "skin"], default="auto")
    ap.add_argument(
        "--no-mirror",
        action="store_true",
        help="Disable horizontal mirroring (default is mirrored/selfie mode)",
    )
    ap.add_argument("--log-level", default="INFO")
    add_render_args(ap)
    args = ap.parse_args()

    setup_logging(args.log_level)
    settings = settings_from_args(args)
    renderer = FrameRenderer(settings)

    with VideoSource() as source, create_hand_tracker(args.backend, max_num_hands=args.max_hands) as tracker:
        source.open(args.camera, args.width, args.height, args.fps)
        last = time.perf_counter()
        fps = 0.0

        while True:
            frame = source.read()
            if frame is None:
                break

            if not args.no_mirror:
                frame = cv2.flip(frame, 1)

            tracking = tracker.track(frame)
            out = renderer.render(frame, tracking, settings)

            now = time.perf_counter()
            fps = 0.9 * fps + 0.1 / max(1e-6, now - last)
            last = now
            ghost = "on" if settings.enable_ghost_style else "off"
            draw_text(
                out,
                f"hands: {len(tracking)} | {fps:4.1f} fps | ghost {ghost} | g/l/h toggle, q quit",
                (12, 28),
                scale=0.7,
            )

            cv2.imshow("ghosthand", out)
            key = cv2.waitKey(1) & 0xFF
            if key in (ord("q"), 27):
                break
            if key == ord("g"):
                settings = settings.replace(enable_ghost_style=not settings.enable_ghost_style)
            elif key == ord("l"):
                settings = settings.replace(show_landmarks=not settings.show_landmarks)
            elif key == ord("h"):
                settings = settings.replace(show_handedness_label=not settings.show_handedness_label)

    cv2.destroyAllWindows()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
