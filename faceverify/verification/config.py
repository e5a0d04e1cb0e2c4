from dataclasses import dataclass
from pathlib import Path

# -------------------------
# Config
# -------------------------
@dataclass
class VerifyConfig:
    # canonical patch
    patch_size: int = 160
    desired_eye_distance: float = 80.0

    # verdict on comparisons (cosine similarity); the score is always reported
    match_threshold: float = 0.6

    # models
    model_path: Path = Path("models/facenet.onnx")
    landmarker_path: Path = Path("face_landmarker.task")

    # camera
    camera_index: int = 0
    mirror: bool = True

    # outputs
    activity_log: Path = Path("data/verify_activity.txt")
    preview: bool = True

    # MQTT (optional)
    mqtt_enabled: bool = False
    mqtt_broker: str = "localhost"
    mqtt_port: int = 1883
    team_id: str = "default_team"

    debug: bool = False

    def __post_init__(self):
        if self.patch_size <= 0 or self.patch_size % 2:
            raise ValueError(f"patch_size must be a positive even number, got {self.patch_size}")
        if self.desired_eye_distance <= 0:
            raise ValueError(f"desired_eye_distance must be > 0, got {self.desired_eye_distance}")
        self.model_path = Path(self.model_path)
        self.landmarker_path = Path(self.landmarker_path)
        self.activity_log = Path(self.activity_log)
