"""
Alignment preview using the verification geometry:
- Haar face detection + FaceLandmarker eyes
- eye-leveled similarity warp (inter-eye distance 80 px)
- 160x160 ROI around the eyes midpoint
Shows the canonical patch for every frame, no embedding involved.
Run:
python -m faceverify.align
Keys:
q quit
s save current canonical patch to data/debug_aligned/<timestamp>.jpg
"""
from __future__ import annotations
import time
from pathlib import Path
from typing import Optional
import cv2
import numpy as np
from .camera import FrameSource
from .haar_5pt import Haar5ptDetector
from .verification.aligner import align_frame
from .verification.config import VerifyConfig
from .verification.errors import VerificationAborted
from .verification.geometry import estimate_alignment
from .verification.normalizer import normalize_patch
from .verification.preview import patch_to_bgr
from .verification.roi import extract_roi
from .verification.types import LEFT_EYE, RIGHT_EYE, Frame

def _put_text(img, text: str, xy=(10, 30), scale=0.8, thickness=2):
     cv2.putText(img, text, xy, cv2.FONT_HERSHEY_SIMPLEX, scale, (255, 255, 255), thickness, cv2.LINE_AA)

def canonical_patch_bgr(frame: Frame, face, cfg: VerifyConfig) -> Optional[np.ndarray]:
     """Canonical patch rendered back to uint8 BGR, or None if the face can't be aligned."""
     left = face.landmarks.get(LEFT_EYE)
     right = face.landmarks.get(RIGHT_EYE)
     if left is None or right is None:
          return None
     try:
          transform = estimate_alignment(left, right, cfg.desired_eye_distance)
          aligned = align_frame(frame, transform)
          crop = extract_roi(aligned, transform.pivot, cfg.patch_size)
     except VerificationAborted as e:
          print(f"[align] skipped: {e.reason}")
          return None
     return patch_to_bgr(normalize_patch(crop, frame.layout, cfg.patch_size).data)

def main(cfg: Optional[VerifyConfig] = None):
     cfg = cfg or VerifyConfig()
     det = Haar5ptDetector(landmarker_path=str(cfg.landmarker_path), min_size=(70, 70), smooth_alpha=0.80, debug=cfg.debug)

     blank = np.zeros((cfg.patch_size, cfg.patch_size, 3), dtype=np.uint8)

     save_dir = Path("data/debug_aligned")
     save_dir.mkdir(parents=True, exist_ok=True)

     last_patch = blank.copy()
     fps_t0 = time.time()
     fps_n = 0
     fps = 0.0
     print("align running. Press 'q' to quit, 's' to save canonical patch.")
     with FrameSource(cfg.camera_index, mirror=cfg.mirror) as src:
          for frame in src.frames():
               faces = det.detect(frame, max_faces=1)
               vis = frame.pixels.copy()

               if faces:
                    f = faces[0]
                    cv2.rectangle(vis, (f.x1, f.y1), (f.x2, f.y2), (0, 255, 0), 2)
                    for (x, y) in f.landmarks.values():
                         cv2.circle(vis, (int(x), int(y)), 3, (0, 255, 0), -1)

                    patch = canonical_patch_bgr(frame, f, cfg)

                    # keep last good patch so the window doesn't go black on brief misses
                    if patch is not None:
                         last_patch = patch
                    _put_text(vis, "OK (Haar + FaceLandmarker eyes)", (10, 30), 0.75, 2)
               else:
                    _put_text(vis, "no face", (10, 30), 0.9, 2)

               fps_n += 1
               dt = time.time() - fps_t0
               if dt >= 1.0:
                    fps = fps_n / dt
                    fps_n = 0
                    fps_t0 = time.time()
               _put_text(vis, f"FPS: {fps:.1f}", (10, 60), 0.75, 2)
               _put_text(vis, f"eyes -> {cfg.desired_eye_distance:.0f}px, patch {cfg.patch_size}x{cfg.patch_size}", (10, 90), 0.75, 2)

               cv2.imshow("align - camera", vis)
               cv2.imshow("align - canonical", last_patch)

               key = cv2.waitKey(1) & 0xFF
               if key == ord("q"):
                    break

               if key == ord("s"):
                    ts = int(time.time() * 1000)
                    out_path = save_dir / f"{ts}.jpg"
                    cv2.imwrite(str(out_path), last_patch)
                    print(f"[align] saved: {out_path}")

     cv2.destroyAllWindows()


if __name__ == "__main__":
     main()
