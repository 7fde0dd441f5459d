"""
Tests for the sample data sender.
"""

import requests

import post_sample_data


def test_unreachable_backend_stops_after_registration(monkeypatch, capsys):
    calls = []

    def unreachable(url, **kwargs):
        calls.append(url)
        raise requests.exceptions.ConnectionError("connection refused")

    monkeypatch.setattr(post_sample_data.requests, "post", unreachable)

    post_sample_data.post_measurements(count=3)

    assert calls == [f"{post_sample_data.API_URL}/api/stations"]
    assert "Station registration failed: connection refused" in capsys.readouterr().out
