import json
import time
from typing import Optional
import paho.mqtt.client as mqtt
from .verification.types import AttemptResult

class MQTTManager:
    def __init__(self, broker: str = "localhost", port: int = 1883, team_id: str = "default_team", connect: bool = True):
        self.broker = broker
        self.port = port
        self.team_id = team_id
        self.connected = False
        self.client: Optional[mqtt.Client] = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2)
        self.client.on_connect = self._on_connect
        self.client.on_disconnect = self._on_disconnect

        if connect:
            try:
                self.client.connect(self.broker, self.port, 60)
                self.client.loop_start()
            except OSError as e:
                print(f"[MQTT] Failed to connect: {e}")

    def _on_connect(self, client, userdata, flags, reason_code, properties=None):
        print(f"[MQTT] Connected with result code {reason_code}")
        if reason_code == 0:
            self.connected = True
            self.publish_heartbeat()

    def _on_disconnect(self, client, userdata, disconnect_flags, reason_code, properties=None):
        self.connected = False
        print(f"[MQTT] Disconnected with result code {reason_code}")

    def _publish(self, topic: str, payload: dict) -> bool:
        if not self.client:
            return False
        try:
            self.client.publish(topic, json.dumps(payload))
        except (OSError, ValueError) as e:
            print(f"[MQTT] Failed to publish to {topic}: {e}")
            return False
        return True

    def publish_result(self, result: AttemptResult) -> bool:
        topic = f"vision/{self.team_id}/verify"
        payload = {
            "event": result.outcome.value,
            "phase": result.phase.value,
            "timestamp": int(time.time()),
        }
        if result.has_score:
            payload["similarity"] = round(float(result.similarity), 6)
            payload["accepted"] = bool(result.accepted)
        if result.reason:
            payload["reason"] = result.reason
        return self._publish(topic, payload)

    def publish_heartbeat(self) -> bool:
        topic = f"vision/{self.team_id}/heartbeat"
        payload = {
            "node": "pc",
            "status": "ONLINE",
            "timestamp": int(time.time())
        }
        ok = self._publish(topic, payload)
        if ok:
            print(f"[MQTT] Published heartbeat to {topic}")
        return ok

    def stop(self):
        if self.client:
            self.client.loop_stop()
            self.client.disconnect()
