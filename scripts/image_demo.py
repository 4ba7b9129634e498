from __future__ import annotations

import argparse
import os
import sys

import cv2

# Allow running without installing the package (repo-local usage).
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC_ROOT = os.path.join(REPO_ROOT, "src")
if SRC_ROOT not in sys.path:
    sys.path.insert(0, SRC_ROOT)

from ghosthand.config import GhostRenderSettings  # noqa: E402
from ghosthand.detector import create_hand_tracker  # noqa: E402
from ghosthand.log import setup_logging  # noqa: E402
from ghosthand.renderer import FrameRenderer  # noqa: E402


def main() -> int:
    ap = argparse.ArgumentParser(description="Render the ghost-hand overlay onto a single image.")
    ap.add_argument("--image", required=True, help="Path to input image")
    ap.add_argument("--out", required=True, help="Path to output image")
    ap.add_argument("--max-hands", type=int, default=2, help="Maximum number of hands to track")
    ap.add_argument("--backend", choices=["auto", "mediapipe", "skin"], default="auto")
    ap.add_argument("--show-landmarks", action="store_true")
    ap.add_argument("--log-level", default="INFO")
    args = ap.parse_args()

    setup_logging(args.log_level)

    frame = cv2.imread(args.image)
    if frame is None:
        raise RuntimeError(f"Could not read image: {args.image}")

    settings = GhostRenderSettings(show_landmarks=args.show_landmarks, show_handedness_label=args.show_landmarks)
    kwargs = {"max_num_hands": args.max_hands}
    if args.backend != "skin":
        kwargs["static_image_mode"] = True
    with create_hand_tracker(args.backend, **kwargs) as tracker:
        tracking = tracker.track(frame)

    out = FrameRenderer(settings).render(frame, tracking)

    ok = cv2.imwrite(args.out, out)
    if not ok:
        raise RuntimeError(f"Could not write output image: {args.out}")

    print(f"hands: {len(tracking)}")
    for i, hand in enumerate(tracking.hands):
        print(f"[{i}] {hand.display_label} points={len(hand.points)}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
