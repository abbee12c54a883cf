import base64

import pytest
import requests

from conftest import PNG_B64, PNG_BYTES, PNG_DATA_URI, FakeResponse, RequestRecorder
from pixel_genie.image import client, horde_client, service
from pixel_genie.image.encoding import extension_for, split_data_uri, to_data_uri


# ============================================================
# Encoding
# ============================================================

def test_to_data_uri_wraps_raw_base64():
    assert to_data_uri(PNG_B64, "image/png") == PNG_DATA_URI
    assert to_data_uri(PNG_DATA_URI) == PNG_DATA_URI


def test_to_data_uri_rejects_empty_payload():
    with pytest.raises(RuntimeError, match="no image data"):
        to_data_uri("  ")


def test_split_data_uri_decodes_bytes():
    assert split_data_uri(PNG_DATA_URI) == ("image/png", PNG_BYTES)


@pytest.mark.parametrize(
    "uri",
    ["", "https://example.com/cat.png", "data:image/png,rawtext", "data:image/png;base64,@@@"],
)
def test_split_data_uri_rejects_invalid_input(uri):
    with pytest.raises(ValueError):
        split_data_uri(uri)


def test_extension_for_known_and_unknown_types():
    assert extension_for("image/png") == "png"
    assert extension_for("image/jpeg") == "jpg"
    assert extension_for("image/x-unknown") == "bin"


# ============================================================
# Generic provider client
# ============================================================

@pytest.fixture
def use_image_provider(monkeypatch):
    def _use(name, key="secret-key"):
        monkeypatch.setattr(client, "IMAGE_PROVIDER", name)
        monkeypatch.setattr(client, "load_key", lambda path: key)
    return _use


def test_imagen_request_and_response(monkeypatch, use_image_provider):
    use_image_provider("gemini")
    recorder = RequestRecorder(FakeResponse(payload={
        "predictions": [{"bytesBase64Encoded": PNG_B64, "mimeType": "image/png"}]
    }))
    monkeypatch.setattr(requests, "post", recorder)

    assert client.send_image_request("8-bit cat") == PNG_B64

    call = recorder.calls[0]
    assert call["url"].endswith(f"/models/{client.IMAGE_MODEL}:predict")
    assert call["headers"]["x-goog-api-key"] == "secret-key"
    assert call["json"]["instances"] == [{"prompt": "8-bit cat"}]
    assert call["json"]["parameters"]["sampleCount"] == 1


def test_openai_image_request_asks_for_base64(monkeypatch, use_image_provider):
    use_image_provider("openai")
    recorder = RequestRecorder(FakeResponse(payload={"data": [{"b64_json": PNG_B64}]}))
    monkeypatch.setattr(requests, "post", recorder)

    assert client.send_image_request("8-bit cat") == PNG_B64
    assert recorder.calls[0]["json"]["response_format"] == "b64_json"
    assert recorder.calls[0]["headers"]["Authorization"] == "Bearer secret-key"


def test_local_image_request(monkeypatch, use_image_provider):
    use_image_provider("local", key=None)
    recorder = RequestRecorder(FakeResponse(payload={"images": [PNG_B64]}))
    monkeypatch.setattr(requests, "post", recorder)

    assert client.send_image_request("8-bit cat") == PNG_B64
    assert recorder.calls[0]["json"]["prompt"] == "8-bit cat"


def test_filtered_imagen_response_raises(monkeypatch, use_image_provider):
    use_image_provider("gemini")
    monkeypatch.setattr(requests, "post", RequestRecorder(FakeResponse(payload={})))

    with pytest.raises(RuntimeError, match="No image was generated"):
        client.send_image_request("8-bit cat")


def test_image_http_error_hides_body(monkeypatch, use_image_provider):
    use_image_provider("gemini")
    monkeypatch.setattr(
        requests, "post",
        RequestRecorder(FakeResponse(status_code=400, text="secret internals")),
    )

    with pytest.raises(RuntimeError) as excinfo:
        client.send_image_request("8-bit cat")

    assert str(excinfo.value) == "GEMINI IMAGE HTTP ERROR (400)"


def test_image_missing_key(use_image_provider):
    use_image_provider("openai", key=None)

    with pytest.raises(RuntimeError, match="OPENAI IMAGE KEY NOT FOUND"):
        client.send_image_request("8-bit cat")


def test_unknown_image_provider(monkeypatch):
    monkeypatch.setattr(client, "IMAGE_PROVIDER", "nope")

    with pytest.raises(ValueError, match="Unknown image provider"):
        client.send_image_request("8-bit cat")


# ============================================================
# AI Horde client
# ============================================================

@pytest.fixture
def no_sleep(monkeypatch):
    monkeypatch.setattr(horde_client.time, "sleep", lambda seconds: None)


def test_horde_polls_until_done_and_downloads(monkeypatch, no_sleep):
    post = RequestRecorder(FakeResponse(payload={"id": "job-1"}))
    get = RequestRecorder(
        FakeResponse(status_code=429),
        FakeResponse(payload={"done": False}),
        FakeResponse(payload={"done": True, "generations": [{"img": "https://cdn/x.webp"}]}),
        FakeResponse(content=PNG_BYTES),
    )
    monkeypatch.setattr(requests, "post", post)
    monkeypatch.setattr(requests, "get", get)

    result = horde_client.send_ai_horde_request("8-bit cat", 512, 512, 25)

    assert result == base64.b64encode(PNG_BYTES).decode("ascii")
    assert post.calls[0]["json"]["params"] == {"width": 512, "height": 512, "steps": 25, "n": 1}
    assert get.calls[2]["url"].endswith("job-1")
    assert get.calls[3]["url"] == "https://cdn/x.webp"


def test_horde_inline_base64_is_returned_as_is(monkeypatch, no_sleep):
    monkeypatch.setattr(requests, "post", RequestRecorder(FakeResponse(payload={"id": "job-1"})))
    monkeypatch.setattr(requests, "get", RequestRecorder(
        FakeResponse(payload={"finished": 1, "generations": [{"img": PNG_B64}]}),
    ))

    assert horde_client.send_ai_horde_request("8-bit cat", 512, 512, 25) == PNG_B64


def test_horde_faulted_job_raises(monkeypatch, no_sleep):
    monkeypatch.setattr(requests, "post", RequestRecorder(FakeResponse(payload={"id": "job-1"})))
    monkeypatch.setattr(requests, "get", RequestRecorder(FakeResponse(payload={"faulted": True})))

    with pytest.raises(RuntimeError, match="faulted"):
        horde_client.send_ai_horde_request("8-bit cat", 512, 512, 25)


def test_horde_missing_job_id_raises(monkeypatch):
    monkeypatch.setattr(requests, "post", RequestRecorder(FakeResponse(payload={})))

    with pytest.raises(RuntimeError, match="job id"):
        horde_client.send_ai_horde_request("8-bit cat", 512, 512, 25)


def test_horde_gives_up_after_max_wait(monkeypatch, no_sleep):
    monkeypatch.setattr(horde_client, "HORDE_MAX_WAIT", -1)
    monkeypatch.setattr(requests, "post", RequestRecorder(FakeResponse(payload={"id": "job-1"})))

    with pytest.raises(RuntimeError, match="timed out"):
        horde_client.send_ai_horde_request("8-bit cat", 512, 512, 25)


# ============================================================
# Dispatch service
# ============================================================

def test_generate_image_returns_data_uri(monkeypatch):
    monkeypatch.setattr(service, "IMAGE_PROVIDER", "gemini")
    monkeypatch.setattr(service, "send_image_request", lambda prompt: PNG_B64)

    assert service.generate_image("8-bit cat") == PNG_DATA_URI


def test_generate_image_uses_horde_branch(monkeypatch):
    calls = []

    def fake_horde(prompt, width, height, steps):
        calls.append((prompt, width, height, steps))
        return PNG_B64

    monkeypatch.setattr(service, "IMAGE_PROVIDER", "ai_horde")
    monkeypatch.setattr(service, "send_ai_horde_request", fake_horde)

    result = service.generate_image("8-bit cat")

    assert result == f"data:image/webp;base64,{PNG_B64}"
    assert calls == [("8-bit cat", service.IMAGE_WIDTH, service.IMAGE_HEIGHT, service.IMAGE_STEPS)]


# ============================================================
# Sanitized failures
# ============================================================

def test_local_non_json_body_raises_labeled_error(monkeypatch, use_image_provider):
    use_image_provider("local", key=None)
    monkeypatch.setattr(
        requests, "post",
        RequestRecorder(FakeResponse(payload=None, text="<html>Bad Gateway</html>")),
    )

    with pytest.raises(RuntimeError) as excinfo:
        client.send_image_request("8-bit cat")

    assert str(excinfo.value) == "LOCAL IMAGE REQUEST FAILED"


def test_horde_failed_submit_is_sanitized(monkeypatch):
    monkeypatch.setattr(
        requests, "post",
        RequestRecorder(FakeResponse(status_code=500, text="stack trace")),
    )

    with pytest.raises(RuntimeError) as excinfo:
        horde_client.send_ai_horde_request("8-bit cat", 512, 512, 25)

    assert str(excinfo.value) == "AI_HORDE IMAGE HTTP ERROR (500)"


def test_horde_failed_download_hides_signed_url(monkeypatch, no_sleep):
    signed = "https://r2.example/img.webp?X-Amz-Signature=SECRET123"
    monkeypatch.setattr(requests, "post", RequestRecorder(FakeResponse(payload={"id": "job-1"})))
    monkeypatch.setattr(requests, "get", RequestRecorder(
        FakeResponse(payload={"done": True, "generations": [{"img": signed}]}),
        FakeResponse(status_code=403),
    ))

    with pytest.raises(RuntimeError) as excinfo:
        horde_client.send_ai_horde_request("8-bit cat", 512, 512, 25)

    assert str(excinfo.value) == "AI_HORDE IMAGE HTTP ERROR (403)"
    assert "SECRET123" not in str(excinfo.value)


def test_horde_connection_error_while_polling(monkeypatch, no_sleep):
    monkeypatch.setattr(requests, "post", RequestRecorder(FakeResponse(payload={"id": "job-1"})))
    monkeypatch.setattr(requests, "get", RequestRecorder(
        requests.exceptions.ConnectionError("https://aihorde.net/api/v2/generate/status/job-1"),
    ))

    with pytest.raises(RuntimeError, match="^AI_HORDE IMAGE HTTP ERROR$"):
        horde_client.send_ai_horde_request("8-bit cat", 512, 512, 25)


@pytest.mark.asyncio
async def test_pipeline_error_never_shows_signed_url(monkeypatch, no_sleep, refiner):
    from pixel_genie.core.engine import GenerationPipeline

    signed = "https://r2.example/img.webp?X-Amz-Signature=SECRET123"
    monkeypatch.setattr(service, "IMAGE_PROVIDER", "ai_horde")
    monkeypatch.setattr(requests, "post", RequestRecorder(FakeResponse(payload={"id": "job-1"})))
    monkeypatch.setattr(requests, "get", RequestRecorder(
        FakeResponse(payload={"done": True, "generations": [{"img": signed}]}),
        FakeResponse(status_code=403),
    ))
    pipeline = GenerationPipeline(refiner=refiner, generator=service.generate_image)

    state = await pipeline.submit("a cat")

    assert state.error == "AI_HORDE IMAGE HTTP ERROR (403)"
    assert state.generated_image is None


def test_default_image_model_per_provider():
    from pixel_genie.llm.provider_config import default_image_model

    assert default_image_model("gemini") == "imagen-3.0-generate-002"
    assert default_image_model("openai") == "dall-e-2"
    assert default_image_model("local") == ""
