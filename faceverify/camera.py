"""
Frame source over cv2.VideoCapture.
Run (camera test):
python -m faceverify.camera
"""

from __future__ import annotations
from typing import Iterator, Optional
import cv2
import numpy as np
from .verification.types import ColorLayout, Frame

class FrameSource:
     """
     Yields BGR Frame objects from a camera. Optionally mirrored
     (front-camera view).
     """

     def __init__(self, cam_index: int = 0, mirror: bool = True):
          self.cam_index = int(cam_index)
          self.mirror = bool(mirror)
          self.cap = cv2.VideoCapture(self.cam_index)
          if not self.cap.isOpened():
               raise RuntimeError(f"Camera {self.cam_index} not opened. Try changing index (0/1/2).")

     def read(self) -> Optional[np.ndarray]:
          ok, img = self.cap.read()
          if not ok:
               return None
          if self.mirror:
               img = cv2.flip(img, 1)
          return img

     def frames(self) -> Iterator[Frame]:
          while True:
               img = self.read()
               if img is None:
                    return
               yield Frame(pixels=img, layout=ColorLayout.BGR)

     def release(self):
          self.cap.release()

     def __enter__(self):
          return self

     def __exit__(self, exc_type, exc, tb):
          self.release()
          return False


def main(cam_index: int = 0):
     with FrameSource(cam_index, mirror=True) as src:
          print("Camera test. Press 'q' to quit.")
          for frame in src.frames():
               cv2.imshow("Camera Test", frame.pixels)
               if (cv2.waitKey(1) & 0xFF) == ord("q"):
                    break
          else:
               print("Failed to read frame.")
     cv2.destroyAllWindows()


if __name__ == "__main__":
     main()
