from webos_remote.domain.device import DEFAULT_CONTROL_PORT, DEFAULT_DEVICE_NAME, Device


class TestDevice:
    def test_default_port(self):
        device = Device(name="LG TV", host="10.0.0.5")
        assert device.port == DEFAULT_CONTROL_PORT == 3000

    def test_ids_are_unique(self):
        first = Device(name="LG TV", host="10.0.0.5")
        second = Device(name="LG TV", host="10.0.0.5")
        assert first.id != second.id

    def test_equality_uses_identity_not_attributes(self):
        first = Device(name="LG TV", host="10.0.0.5")
        second = Device(name="LG TV", host="10.0.0.5")
        assert first != second

    def test_same_id_is_same_device(self):
        first = Device(name="Living room", host="10.0.0.5", id="abc")
        second = Device(name="Bedroom", host="10.0.0.9", id="abc")
        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second}) == 1

    def test_websocket_url(self):
        device = Device(name="LG TV", host="192.168.1.50", port=3001)
        assert device.websocket_url == "ws://192.168.1.50:3001"

    def test_manual_device(self):
        device = Device.manual("192.168.1.77")
        assert device.name == DEFAULT_DEVICE_NAME
        assert device.host == "192.168.1.77"
        assert device.port == 3000
        assert device.model is None
