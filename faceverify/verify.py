"""
One-shot face verification using the eye-aligned FaceNet pipeline:
Haar -> FaceLandmarker eyes -> eye-leveled warp -> 160x160 patch [0,1] RGB
-> FaceNet ONNX embedding -> enroll on first success, cosine similarity after.

Run:
python -m faceverify.verify [--model models/facenet.onnx] [--camera 0]

Keys:
SPACE : arm (the next frame is processed once)
q     : quit
"""

from __future__ import annotations
import argparse
import time
from pathlib import Path
from typing import List, Optional
import cv2

from .camera import FrameSource
from .haar_5pt import Haar5ptDetector
from .mqtt_manager import MQTTManager
from .verification.config import VerifyConfig
from .verification.embedder import FaceNetEmbedderONNX
from .verification.logger import SessionLogger
from .verification.pipeline import VerificationPipeline
from .verification.preview import PatchPreview
from .verification.session import SessionState
from .verification.types import AttemptResult, Outcome
from .verification.worker import FrameWorker


def status_lines(state: SessionState, last: Optional[AttemptResult], worker: FrameWorker) -> List[str]:
    lines = [
        f"phase: {state.phase.value}",
        "reference: enrolled" if state.enrolled else "reference: none (next success enrolls)",
    ]
    if last is not None:
        if last.outcome is Outcome.COMPARED:
            verdict = "MATCH" if last.accepted else "NO MATCH"
            lines.append(f"similarity: {last.similarity:.3f} ({verdict})")
        elif last.outcome is Outcome.ENROLLED:
            lines.append(f"enrolled (dim={last.dim})")
        else:
            lines.append(f"aborted: {last.reason}")
    lines.append(f"dropped frames: {worker.dropped}")
    return lines


def draw_text_block(img, lines, origin=(10, 30), scale=0.7, color=(0, 255, 0)):
    x, y = origin
    for line in lines:
        cv2.putText(img, line, (x, y), cv2.FONT_HERSHEY_SIMPLEX, scale, color, 2)
        y += int(40 * scale)


def run(cfg: VerifyConfig):
    det = Haar5ptDetector(landmarker_path=str(cfg.landmarker_path), min_size=(70, 70), debug=cfg.debug)
    embedder = FaceNetEmbedderONNX(model_path=str(cfg.model_path), debug=cfg.debug)
    activity_logger = SessionLogger(str(cfg.activity_log))
    preview = PatchPreview() if cfg.preview else None

    mqtt_manager = None
    if cfg.mqtt_enabled:
        mqtt_manager = MQTTManager(broker=cfg.mqtt_broker, port=cfg.mqtt_port, team_id=cfg.team_id)
    last_heartbeat = 0.0
    heartbeat_interval = 5.0  # seconds

    state = SessionState()
    pipeline = VerificationPipeline(det, embedder, config=cfg, logger=activity_logger, preview=preview)

    last_result: Optional[AttemptResult] = None

    def on_result(result: AttemptResult):
        nonlocal last_result
        last_result = result
        if result.outcome is Outcome.COMPARED:
            print(f"[verify] similarity={result.similarity:.4f}")
        if mqtt_manager is not None:
            mqtt_manager.publish_result(result)

    worker = FrameWorker(pipeline, state, on_result=on_result).start()

    print("Verify (one-shot). SPACE=arm, q=quit")
    print("First successful attempt enrolls the reference; later attempts report similarity.")

    try:
        with FrameSource(cfg.camera_index, mirror=cfg.mirror) as src:
            for frame in src.frames():
                worker.raise_if_failed()
                worker.submit(frame)

                vis = frame.pixels.copy()
                draw_text_block(vis, status_lines(state, last_result, worker))
                cv2.imshow("verify", vis)

                if preview is not None:
                    for slot, img in preview.drain():
                        cv2.imshow(f"patch - {slot}", img)

                if mqtt_manager is not None:
                    now = time.time()
                    if now - last_heartbeat > heartbeat_interval:
                        mqtt_manager.publish_heartbeat()
                        last_heartbeat = now

                key = cv2.waitKey(1) & 0xFF
                if key == ord("q"):
                    break
                elif key == ord(" "):
                    if state.activation.arm():
                        activity_logger.log_armed()
    finally:
        worker.stop()
        cv2.destroyAllWindows()
        if mqtt_manager is not None:
            mqtt_manager.stop()

    worker.raise_if_failed()


def build_parser() -> argparse.ArgumentParser:
    d = VerifyConfig()
    parser = argparse.ArgumentParser(
        description="faceverify - one-shot face verification against a session reference",
    )
    parser.add_argument("--model", type=Path, default=d.model_path, help="FaceNet ONNX model (160x160 RGB input)")
    parser.add_argument("--landmarker", type=Path, default=d.landmarker_path, help="MediaPipe face_landmarker.task")
    parser.add_argument("--camera", type=int, default=d.camera_index, help="Camera index (0/1/2)")
    parser.add_argument("--no-mirror", action="store_true", help="Do not mirror the camera image")
    parser.add_argument("--threshold", type=float, default=d.match_threshold, help="Similarity needed for a MATCH verdict")
    parser.add_argument("--log", type=Path, default=d.activity_log, help="Activity log file")
    parser.add_argument("--no-preview", action="store_true", help="Disable canonical patch windows")
    parser.add_argument("--mqtt", metavar="BROKER", help="Publish events to this MQTT broker")
    parser.add_argument("--mqtt-port", type=int, default=d.mqtt_port)
    parser.add_argument("--team-id", default=d.team_id)
    parser.add_argument("-v", "--debug", action="store_true", help="Print pipeline diagnostics")
    return parser


def config_from_args(args: argparse.Namespace) -> VerifyConfig:
    return VerifyConfig(
        match_threshold=args.threshold,
        model_path=args.model,
        landmarker_path=args.landmarker,
        camera_index=args.camera,
        mirror=not args.no_mirror,
        activity_log=args.log,
        preview=not args.no_preview,
        mqtt_enabled=args.mqtt is not None,
        mqtt_broker=args.mqtt or VerifyConfig.mqtt_broker,
        mqtt_port=args.mqtt_port,
        team_id=args.team_id,
        debug=args.debug,
    )


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)
    run(config_from_args(args))


if __name__ == "__main__":
    main()
