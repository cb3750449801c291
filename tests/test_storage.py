import os
from unittest.mock import MagicMock

import pytest
import requests

from studio.core.config import settings
from studio.core.errors import ValidationError
from studio.services import storage
from studio.services.storage import (
    delete_package_image,
    extract_file_key,
    save_package_image,
)


def test_extract_file_key():
    assert extract_file_key("https://utfs.io/f/abc123") == "abc123"
    assert extract_file_key("https://utfs.io/f/abc123?x=1") == "abc123"
    assert extract_file_key("https://cdn.example.com/images/abc.png") == "abc.png"


def test_save_and_delete_local_image():
    url = save_package_image("image/webp", b"data")
    path = os.path.join(settings.UPLOAD_DIR, url[len("/media/"):])
    assert os.path.exists(path)

    assert delete_package_image(url) is True
    assert not os.path.exists(path)


def test_save_rejects_unknown_type():
    with pytest.raises(ValidationError):
        save_package_image("application/pdf", b"data")


def test_refuses_paths_outside_upload_dir():
    assert delete_package_image("/media/../../etc/passwd") is False


def test_empty_url():
    assert delete_package_image(None) is False
    assert delete_package_image("") is False


def test_remote_delete_posts_file_key(monkeypatch):
    monkeypatch.setattr(settings, "UPLOADTHING_SECRET", "sk_test")
    post = MagicMock()
    monkeypatch.setattr(storage.requests, "post", post)

    assert delete_package_image("https://utfs.io/f/abc123") is True

    post.assert_called_once()
    assert post.call_args.kwargs["json"] == {"fileKeys": ["abc123"]}
    assert post.call_args.kwargs["headers"] == {"X-Uploadthing-Api-Key": "sk_test"}


def test_remote_delete_failure_is_reported(monkeypatch):
    monkeypatch.setattr(settings, "UPLOADTHING_SECRET", "sk_test")
    monkeypatch.setattr(
        storage.requests, "post", MagicMock(side_effect=requests.ConnectionError("offline"))
    )

    assert delete_package_image("https://utfs.io/f/abc123") is False


def test_remote_delete_without_secret(monkeypatch):
    monkeypatch.setattr(settings, "UPLOADTHING_SECRET", None)

    assert delete_package_image("https://utfs.io/f/abc123") is False
