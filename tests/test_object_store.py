import io
import json

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from catso.core.errors import UploadFailed
from catso.core.storage import ObjectStore


class FakeS3Client:
    def __init__(self, objects=None, *, get_error=None, put_error=None):
        self.objects = dict(objects or {})
        self.get_error = get_error
        self.put_error = put_error
        self.puts = []

    def get_object(self, *, Bucket, Key):
        if self.get_error is not None:
            raise self.get_error
        if Key not in self.objects:
            raise ClientError({"Error": {"Code": "NoSuchKey", "Message": "missing"}}, "GetObject")
        return {"Body": io.BytesIO(self.objects[Key])}

    def put_object(self, **kwargs):
        if self.put_error is not None:
            raise self.put_error
        self.puts.append(kwargs)
        self.objects[kwargs["Key"]] = kwargs["Body"]
        return {"ETag": '"abc"'}


@pytest.mark.asyncio
async def test_get_json_decodes_payload(settings):
    client = FakeS3Client({"catso/cache.json": json.dumps({"timestamp": 1, "images": []}).encode()})

    result = await ObjectStore(settings, client).get_json("catso/cache.json")

    assert result.is_success()
    assert result.unwrap() == {"timestamp": 1, "images": []}


@pytest.mark.asyncio
async def test_get_json_missing_object_is_not_found_failure(settings):
    result = await ObjectStore(settings, FakeS3Client()).get_json("catso/cache.json")

    assert result.is_failure()
    assert result.error.not_found is True


@pytest.mark.asyncio
async def test_get_json_invalid_json_is_failure(settings):
    client = FakeS3Client({"catso/cache.json": b"{broken"})

    result = await ObjectStore(settings, client).get_json("catso/cache.json")

    assert result.is_failure()
    assert result.error.not_found is False


@pytest.mark.asyncio
async def test_get_json_transport_error_is_failure(settings):
    client = FakeS3Client(get_error=EndpointConnectionError(endpoint_url="https://s3.amazonaws.com"))

    result = await ObjectStore(settings, client).get_json("catso/cache.json")

    assert result.is_failure()
    assert result.unwrap_or("fallback") == "fallback"


@pytest.mark.asyncio
async def test_put_json_is_private(settings):
    client = FakeS3Client()

    await ObjectStore(settings, client).put_json("catso/cache.json", {"timestamp": 5, "images": []})

    put = client.puts[0]
    assert put["Bucket"] == "catso-test"
    assert put["ContentType"] == "application/json"
    assert "ACL" not in put
    assert json.loads(put["Body"]) == {"timestamp": 5, "images": []}


@pytest.mark.asyncio
async def test_put_public_bytes_returns_public_url(settings):
    client = FakeS3Client()

    url = await ObjectStore(settings, client).put_public_bytes("1700.jpg", b"img", content_type="image/jpeg")

    assert url == "https://catso-test.s3.amazonaws.com/1700.jpg"
    assert client.puts[0]["ACL"] == "public-read"
    assert client.puts[0]["ContentType"] == "image/jpeg"


@pytest.mark.asyncio
async def test_public_base_url_override(make_settings):
    store = ObjectStore(make_settings(storage_public_base_url="https://cdn.example.com/"), FakeS3Client())

    assert store.public_url("a.jpg") == "https://cdn.example.com/a.jpg"


@pytest.mark.asyncio
async def test_put_error_raises_upload_failed(settings):
    error = ClientError({"Error": {"Code": "AccessDenied", "Message": "nope"}}, "PutObject")

    with pytest.raises(UploadFailed):
        await ObjectStore(settings, FakeS3Client(put_error=error)).put_json("k", {})
