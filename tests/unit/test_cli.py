from unittest.mock import patch

import pytest

from openai_images.cli import main
from openai_images.errors import APIError, InvalidRequestError
from openai_images.response_mapper import parse_images_response

from .fixtures import (
    CREATE_IMAGE_SUCCESS,
    CREATE_IMAGE_WITH_USAGE,
    IMAGE_VARIATION_SUCCESS,
    OTTER_PROMPT,
    PNG_B64,
    PNG_BYTES,
    REVISED_PROMPT,
)


@pytest.fixture
def env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("OPENAI_API_KEY", "test-api-key")
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    return tmp_path


@pytest.fixture
def mock_client():
    with patch("openai_images.cli.OpenAIImagesClient") as client_cls:
        yield client_cls.return_value


def test_help(capsys):
    assert main(["help"]) == 0
    assert "create" in capsys.readouterr().out


def test_no_command(capsys):
    assert main([]) == 1


def test_missing_api_key(monkeypatch, tmp_path, capsys, mock_client):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    assert main(["create", OTTER_PROMPT]) == 1
    assert "OPENAI_API_KEY" in capsys.readouterr().err
    mock_client.create_image.assert_not_called()


def test_create(env, capsys, mock_client):
    mock_client.create_image.return_value = parse_images_response(CREATE_IMAGE_SUCCESS)

    assert main(["create", "A", "cute", "baby", "sea", "otter"]) == 0

    args, kwargs = mock_client.create_image.call_args
    assert args == ("A cute baby sea otter",)
    assert kwargs["model"] == "gpt-image-1"
    assert kwargs["n"] == 1
    out = capsys.readouterr().out
    assert "https://example.com/image.png" in out
    assert REVISED_PROMPT in out


def test_create_with_options(env, capsys, mock_client):
    mock_client.create_image.return_value = parse_images_response(CREATE_IMAGE_WITH_USAGE)

    code = main([
        "create", "--model", "gpt-image-1", "--size", "1536x1024", "--quality", "high",
        "--background", "transparent", "--output-format", "webp", "--compression", "90",
        "A red apple",
    ])

    assert code == 0
    kwargs = mock_client.create_image.call_args.kwargs
    assert kwargs["size"] == "1536x1024"
    assert kwargs["quality"] == "high"
    assert kwargs["background"] == "transparent"
    assert kwargs["output_format"] == "webp"
    assert kwargs["output_compression"] == 90
    out = capsys.readouterr().out
    assert "Base64 data available" in out
    assert "Total tokens: 100" in out
    assert "Image tokens: 40" in out


def test_invalid_choice_exits_with_1(env, mock_client):
    with pytest.raises(SystemExit) as exc_info:
        main(["create", "--model", "dall-e-4", OTTER_PROMPT])

    assert exc_info.value.code == 1


def test_missing_prompt_exits_with_1(env, mock_client):
    with pytest.raises(SystemExit) as exc_info:
        main(["create"])

    assert exc_info.value.code == 1


def test_api_error(env, capsys, mock_client):
    mock_client.create_image.side_effect = APIError("Incorrect API key provided", 401)

    assert main(["create", OTTER_PROMPT]) == 1
    assert "API error (401): Incorrect API key provided" in capsys.readouterr().err


def test_invalid_request(env, capsys, mock_client):
    mock_client.create_image.side_effect = InvalidRequestError("Number of images must be between 1 and 10")

    assert main(["create", "--n", "11", OTTER_PROMPT]) == 1
    assert "Number of images" in capsys.readouterr().err


def test_vary_saves_inline_images(env, capsys, mock_client):
    source = env / "otter.png"
    source.write_bytes(PNG_BYTES)
    response = parse_images_response({
        "created": 1677254147,
        "data": [{"b64_json": PNG_B64}],
    })
    mock_client.create_image_variation.return_value = response

    code = main([
        "vary", "--image", str(source), "--response-format", "b64_json", "--output-dir", str(env / "out"),
    ])

    assert code == 0
    args, kwargs = mock_client.create_image_variation.call_args
    assert args == (PNG_BYTES,)
    assert kwargs["response_format"] == "b64_json"
    saved = env / "out" / "image_1677254147_1.png"
    assert saved.read_bytes() == PNG_BYTES


def test_vary_urls(env, capsys, mock_client):
    source = env / "otter.png"
    source.write_bytes(PNG_BYTES)
    mock_client.create_image_variation.return_value = parse_images_response(IMAGE_VARIATION_SUCCESS)

    assert main(["vary", "--image", str(source), "--n", "2"]) == 0
    assert "variation-image-2.png" in capsys.readouterr().out


def test_edit_with_missing_image(env, capsys, mock_client):
    assert main(["edit", "--image", str(env / "missing.png"), "Add a hat"]) == 1
    mock_client.edit_image.assert_not_called()


def test_edit(env, mock_client):
    image = env / "otter.png"
    mask = env / "mask.png"
    image.write_bytes(PNG_BYTES)
    mask.write_bytes(b"mask")
    mock_client.edit_image.return_value = parse_images_response(CREATE_IMAGE_SUCCESS)

    assert main(["edit", "--image", str(image), "--mask", str(mask), "Add", "a", "hat"]) == 0

    args, kwargs = mock_client.edit_image.call_args
    assert args == (PNG_BYTES, "Add a hat")
    assert kwargs["mask"] == b"mask"
    assert kwargs["model"] == "dall-e-2"


def test_config_file_option(env, mock_client, monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY")
    config_path = env / "settings.yaml"
    config_path.write_text("client:\n  api_key: file-key\n  timeout: 15\n", encoding="utf-8")
    mock_client.create_image.return_value = parse_images_response(CREATE_IMAGE_SUCCESS)

    with patch("openai_images.cli.OpenAIImagesClient") as client_cls:
        client_cls.return_value = mock_client
        assert main(["--config", str(config_path), "create", OTTER_PROMPT]) == 0

    kwargs = client_cls.call_args.kwargs
    assert kwargs["api_key"] == "file-key"
    assert kwargs["timeout"] == 15.0


def test_missing_config_file_exits_with_1(env, capsys, mock_client):
    assert main(["--config", str(env / "missing.yaml"), "create", OTTER_PROMPT]) == 1
    assert "missing.yaml" in capsys.readouterr().err
    mock_client.create_image.assert_not_called()
