from enhancer.client.permission.accessibility import AccessibilityPermission


class TestAccessibilityPermission:

    def test_windows_is_always_trusted(self):
        assert AccessibilityPermission('Windows').is_trusted()

    def test_linux_needs_graphical_session(self, monkeypatch):
        monkeypatch.delenv('DISPLAY', raising=False)
        monkeypatch.delenv('WAYLAND_DISPLAY', raising=False)
        permission = AccessibilityPermission('Linux')
        assert not permission.is_trusted()

        monkeypatch.setenv('WAYLAND_DISPLAY', 'wayland-0')
        assert permission.is_trusted()

    def test_request_outside_macos_only_logs(self):
        AccessibilityPermission('Linux').request()
