"""
Haar face detection + named 5-point landmarks (MediaPipe FaceLandmarker).
- Haar is fast and robust on CPU.
- FaceLandmarker confirms a real face and gives stable landmarks.
- We extract ONLY 5 keypoints: LEFT_EYE, RIGHT_EYE, NOSE_BASE, MOUTH_LEFT, MOUTH_RIGHT
- We rebuild bbox from keypoints (centered).
- We reject Haar false positives if FaceLandmarker doesn't produce landmarks.
Run:
python -m faceverify.haar_5pt
"""

from __future__ import annotations
from typing import Optional, Tuple, List
import cv2
import numpy as np
from pathlib import Path
from .verification.normalizer import to_bgr
from .verification.types import (
     LEFT_EYE,
     MOUTH_LEFT,
     MOUTH_RIGHT,
     NOSE_BASE,
     RIGHT_EYE,
     DetectedFace,
     Frame,
     LandmarkSet,
)
try:
     import mediapipe as mp
     from mediapipe.tasks.python import vision
     from mediapipe.tasks.python import BaseOptions
except Exception as e:
     mp = None
     _MP_IMPORT_ERROR = e

# order of the (5,2) keypoint array
KPS_NAMES = (LEFT_EYE, RIGHT_EYE, NOSE_BASE, MOUTH_LEFT, MOUTH_RIGHT)


# -------------------------
# Helpers
# -------------------------

def landmarks_from_kps(kps_5x2: np.ndarray) -> LandmarkSet:
     k = np.asarray(kps_5x2, dtype=np.float32).reshape(-1, 2)
     return {name: (float(k[i, 0]), float(k[i, 1])) for i, name in enumerate(KPS_NAMES[: k.shape[0]])}

def _clip_box_xyxy(b: np.ndarray, W: int, H: int) -> np.ndarray:
     bb = b.astype(np.float32).copy()
     bb[0] = np.clip(bb[0], 0, W - 1)
     bb[1] = np.clip(bb[1], 0, H - 1)
     bb[2] = np.clip(bb[2], 0, W - 1)
     bb[3] = np.clip(bb[3], 0, H - 1)
     return bb

def _bbox_from_5pt(kps: np.ndarray, pad_x: float = 0.55, pad_y_top: float = 0.85, pad_y_bot: float = 1.15) -> np.ndarray:
     """
     Build a face bbox from 5 keypoints with asymmetric padding:
     - more forehead (top)
     - more chin (bottom)
     """

     k = kps.astype(np.float32)
     x_min = float(np.min(k[:, 0]))
     x_max = float(np.max(k[:, 0]))
     y_min = float(np.min(k[:, 1]))
     y_max = float(np.max(k[:, 1]))

     w = max(1.0, x_max - x_min)
     h = max(1.0, y_max - y_min)

     x1 = x_min - pad_x * w
     x2 = x_max + pad_x * w
     y1 = y_min - pad_y_top * h
     y2 = y_max + pad_y_bot * h
     return np.array([x1, y1, x2, y2], dtype=np.float32)

def _ema(prev: Optional[np.ndarray], cur: np.ndarray, alpha: float) -> np.ndarray:
     if prev is None:
          return cur.astype(np.float32)
     return (alpha * prev + (1.0 - alpha) * cur).astype(np.float32)

def _kps_span_ok(kps: np.ndarray, min_eye_dist: float = 12.0) -> bool:
     """
     Quick sanity filter on 5pt geometry:
     - eye distance must be reasonable
     - mouth should be below nose
     """

     k = kps.astype(np.float32)
     le, re, no, lm, rm = k
     eye_dist = float(np.linalg.norm(re - le))
     if eye_dist < min_eye_dist:
          return False

     if not (lm[1] > no[1] and rm[1] > no[1]):
          return False
     return True


# -------------------------
# Detector
# -------------------------

class Haar5ptDetector:
     def __init__(
          self,
          landmarker_path: Optional[str] = None,
          haar_xml: Optional[str] = None,
          min_size: Tuple[int, int] = (60, 60),
          smooth_alpha: float = 0.0,
          debug: bool = False,
     ):
          self.debug = bool(debug)
          self.min_size = tuple(map(int, min_size))
          # 0 disables smoothing; one-shot attempts must not blend stale keypoints
          self.smooth_alpha = float(smooth_alpha)

          # Haar cascade
          if haar_xml is None:
               haar_xml = cv2.data.haarcascades + "haarcascade_frontalface_default.xml"
          self.face_cascade = cv2.CascadeClassifier(haar_xml)
          if self.face_cascade.empty():
               raise RuntimeError(f"Failed to load Haar cascade: {haar_xml}")

          # MediaPipe FaceLandmarker
          if mp is None:
               raise RuntimeError(
                    f"mediapipe import failed: {_MP_IMPORT_ERROR}\n"
                    f"Install: pip install mediapipe"
               )

          if landmarker_path is None:
               landmarker_path = Path(__file__).resolve().parent.parent / "face_landmarker.task"
          if not Path(landmarker_path).exists():
               raise RuntimeError(f"FaceLandmarker model not found: {landmarker_path}")

          options = vision.FaceLandmarkerOptions(
               base_options=BaseOptions(model_asset_path=str(landmarker_path)),
               num_faces=1,
               output_face_blendshapes=False,
               output_facial_transformation_matrixes=False,
          )

          self.landmarker = vision.FaceLandmarker.create_from_options(options)

          # FaceMesh landmark indices for 5 points
          self.IDX_LEFT_EYE = 33
          self.IDX_RIGHT_EYE = 263
          self.IDX_NOSE_TIP = 1
          self.IDX_MOUTH_LEFT = 61
          self.IDX_MOUTH_RIGHT = 291

          self._prev_box: Optional[np.ndarray] = None
          self._prev_kps: Optional[np.ndarray] = None

     def _haar_faces(self, gray: np.ndarray) -> np.ndarray:
          faces = self.face_cascade.detectMultiScale(
               gray,
               scaleFactor=1.1,
               minNeighbors=5,
               flags=cv2.CASCADE_SCALE_IMAGE,
               minSize=self.min_size,
          )
          if faces is None or len(faces) == 0:
               return np.zeros((0, 4), dtype=np.int32)

          # faces are (x,y,w,h)
          return faces.astype(np.int32)

     def _facemesh_5pt(self, frame_bgr: np.ndarray) -> Optional[np.ndarray]:
          H, W = frame_bgr.shape[:2]
          rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)

          mp_image = mp.Image(
               image_format=mp.ImageFormat.SRGB,
               data=rgb
          )

          res = self.landmarker.detect(mp_image)

          if not res.face_landmarks:
               return None

          lm = res.face_landmarks[0]

          idxs = [
               self.IDX_LEFT_EYE,
               self.IDX_RIGHT_EYE,
               self.IDX_NOSE_TIP,
               self.IDX_MOUTH_LEFT,
               self.IDX_MOUTH_RIGHT,
          ]

          pts = []
          for i in idxs:
               p = lm[i]
               pts.append([p.x * W, p.y * H])

          kps = np.array(pts, dtype=np.float32)

          # enforce left/right in image space
          if kps[0, 0] > kps[1, 0]:
               kps[[0, 1]] = kps[[1, 0]]
          if kps[3, 0] > kps[4, 0]:
               kps[[3, 4]] = kps[[4, 3]]

          return kps

     def reset(self):
          self._prev_box = None
          self._prev_kps = None

     def detect(self, frame: Frame, max_faces: int = 1) -> List[DetectedFace]:
          frame_bgr = to_bgr(frame.pixels, frame.layout)
          H, W = frame_bgr.shape[:2]
          gray = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2GRAY)

          faces = self._haar_faces(gray)
          if faces.shape[0] == 0:
               return []

          # pick largest Haar face
          areas = faces[:, 2] * faces[:, 3]
          i = int(np.argmax(areas))
          x, y, w, h = faces[i].tolist()

          kps = self._facemesh_5pt(frame_bgr)
          if kps is None:
               if self.debug:
                    print("[haar_5pt] Haar face found but FaceLandmarker returned none -> reject")
               return []

          # require landmark points to fall reasonably inside the Haar box
          margin = 0.35
          x1m = x - margin * w
          y1m = y - margin * h
          x2m = x + (1.0 + margin) * w
          y2m = y + (1.0 + margin) * h

          inside = (
               (kps[:, 0] >= x1m) & (kps[:, 0] <= x2m) &
               (kps[:, 1] >= y1m) & (kps[:, 1] <= y2m)
          )
          if inside.mean() < 0.60:
               if self.debug:
                    print("[haar_5pt] landmarks not consistent with Haar box -> reject")
               return []
          if not _kps_span_ok(kps, min_eye_dist=max(10.0, 0.18 * w)):
               if self.debug:
                    print("[haar_5pt] 5pt geometry sanity failed -> reject")
               return []

          box = _bbox_from_5pt(kps, pad_x=0.55, pad_y_top=0.85, pad_y_bot=1.15)
          box = _clip_box_xyxy(box, W, H)

          if self.smooth_alpha > 0.0:
               box = _ema(self._prev_box, box, self.smooth_alpha)
               kps = _ema(self._prev_kps, kps, self.smooth_alpha)
               self._prev_box = box.copy()
               self._prev_kps = kps.copy()

          x1, y1, x2, y2 = box.tolist()

          # Haar doesn't provide a probability; use a stable placeholder score
          return [
               DetectedFace(
                    x1=int(round(x1)),
                    y1=int(round(y1)),
                    x2=int(round(x2)),
                    y2=int(round(y2)),
                    score=1.0,
                    landmarks=landmarks_from_kps(kps),
               )
          ][:max_faces]


# -------------------------
# Demo
# -------------------------

def main(cam_index: int = 0):
     from .camera import FrameSource

     det = Haar5ptDetector(min_size=(70, 70), smooth_alpha=0.80, debug=True)
     print("Haar + 5pt (FaceLandmarker) test. Press q to quit.")

     with FrameSource(cam_index, mirror=True) as src:
          for frame in src.frames():
               faces = det.detect(frame, max_faces=1)
               vis = frame.pixels.copy()

               if faces:
                    f = faces[0]
                    cv2.rectangle(vis, (f.x1, f.y1), (f.x2, f.y2), (0, 255, 0), 2)
                    for (px, py) in f.landmarks.values():
                         cv2.circle(vis, (int(px), int(py)), 3, (0, 255, 0), -1)

                    cv2.putText(vis, "OK", (f.x1, max(0, f.y1 - 8)), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 255, 0), 2)
               else:
                    cv2.putText(vis, "no face", (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.9, (0, 0, 255), 2)

               cv2.imshow("haar_5pt", vis)
               if (cv2.waitKey(1) & 0xFF) == ord("q"):
                    break

     cv2.destroyAllWindows()


if __name__ == "__main__":
     main()
