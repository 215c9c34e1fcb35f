def test_new_dashboard_gets_one_snapshot(client):
    with client.websocket_connect("/ws-dashboard") as dashboard:
        update = dashboard.receive_json()
        assert update["event"] == "web_update"
        assert update["data"]["targetTemp"] == 25
        status = dashboard.receive_json()
        assert status["event"] == "esp32_status"
        assert status["data"]["connected"] is False

        # Nothing else arrives until asked for
        dashboard.send_json({"event": "request_state"})
        again = dashboard.receive_json()
        assert again == update


def test_device_report_is_broadcast(client):
    with client.websocket_connect("/ws-dashboard") as dashboard:
        dashboard.receive_json()
        dashboard.receive_json()

        with client.websocket_connect("/ws") as device:
            assert device.receive_json()["event"] == "welcome"
            status = dashboard.receive_json()
            assert status == {"event": "esp32_status", "data": status["data"]}
            assert status["data"]["connected"] is True

            device.send_json({"event": "esp32_message", "data": {"temperature": 26.5, "humidity": 48}})
            update = dashboard.receive_json()
            assert update["event"] == "web_update"
            assert update["data"]["temperature"] == 26.5
            assert update["data"]["history"] == [26.5]
            assert update["data"]["humidityHistory"] == [48]

            # Bare samples are accepted too; the history stays throttled
            device.send_json({"temperature": 27.0})
            update = dashboard.receive_json()
            assert update["data"]["temperature"] == 27.0
            assert update["data"]["history"] == [26.5]


def test_dashboard_command_relayed_and_broadcast(client):
    with client.websocket_connect("/ws") as device:
        device.receive_json()

        with client.websocket_connect("/ws-dashboard") as dashboard:
            dashboard.receive_json()
            dashboard.receive_json()

            command = {"action": "set_mode", "value": "dry"}
            dashboard.send_json({"event": "web_command", "data": command})
            assert device.receive_json() == {"event": "esp32_command", "data": command}
            update = dashboard.receive_json()
            assert update["event"] == "web_update"
            assert update["data"]["mode"] == "dry"


def test_rejected_command_relayed_without_broadcast(client):
    with client.websocket_connect("/ws") as device:
        device.receive_json()

        with client.websocket_connect("/ws-dashboard") as dashboard:
            dashboard.receive_json()
            dashboard.receive_json()

            command = {"action": "set_mode", "value": "heat"}
            dashboard.send_json({"event": "web_command", "data": command})
            assert device.receive_json() == {"event": "esp32_command", "data": command}

            # The next message is the answer to this request, not a broadcast
            dashboard.send_json({"event": "request_state"})
            update = dashboard.receive_json()
            assert update["event"] == "web_update"
            assert update["data"]["mode"] == "cool"


def test_rest_command_reaches_device(client):
    with client.websocket_connect("/ws") as device:
        device.receive_json()

        res = client.post("/api/command", json={"action": "report"})
        assert res.status_code == 200
        assert device.receive_json() == {"event": "esp32_command", "data": {"action": "report"}}


def test_null_device_report_keeps_link_and_broadcasts(client):
    with client.websocket_connect("/ws-dashboard") as dashboard:
        dashboard.receive_json()
        dashboard.receive_json()

        with client.websocket_connect("/ws") as device:
            device.receive_json()
            assert dashboard.receive_json()["data"]["connected"] is True

            device.send_text("null")
            update = dashboard.receive_json()
            assert update["event"] == "web_update"
            assert update["data"]["targetTemp"] == 25

            device.send_json({"event": "esp32_message", "data": None})
            assert dashboard.receive_json()["event"] == "web_update"

            # Other envelopes are skipped without a broadcast
            device.send_json({"event": "debug", "data": {"temperature": 99}})
            device.send_json({"temperature": 23.0})
            update = dashboard.receive_json()
            assert update["event"] == "web_update"
            assert update["data"]["temperature"] == 23.0

            res = client.get("/health")
            assert res.json()["esp32_connected"] is True


def test_binary_frame_does_not_drop_dashboard(client):
    with client.websocket_connect("/ws-dashboard") as dashboard:
        dashboard.receive_json()
        dashboard.receive_json()

        dashboard.send_bytes(b"\x00\x01")
        dashboard.send_json({"event": "request_state"})
        assert dashboard.receive_json()["event"] == "web_update"
        assert client.get("/health").json()["active_connections"] == 1
