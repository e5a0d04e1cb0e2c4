"""
Single-session Face Verification with Eye Alignment and FaceNet ONNX

This package implements a one-shot face verification pipeline:
- Face detection using Haar Cascade
- Eye landmarks using MediaPipe FaceLandmarker
- Eye-leveled similarity warp and 160x160 canonical patch
- FaceNet embedding generation using ONNX Runtime
- First success enrolls the reference, later triggers report cosine similarity
"""

__version__ = "1.0.0"
