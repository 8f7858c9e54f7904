from catso.apps.skill.responses import (
    build_photo_speechlet_response,
    build_response,
    build_speechlet_response,
)
from catso.domain.models import ImagePair


def test_speechlet_response_shape():
    speechlet = build_speechlet_response("Welcome", "Hello there", "Still there?", False)

    assert speechlet == {
        "outputSpeech": {"type": "PlainText", "text": "Hello there"},
        "card": {"type": "Simple", "title": "Welcome", "content": "Hello there"},
        "reprompt": {"outputSpeech": {"type": "PlainText", "text": "Still there?"}},
        "shouldEndSession": False,
    }


def test_missing_reprompt_becomes_empty_text():
    speechlet = build_speechlet_response("Bye", "", None, True)

    assert speechlet["reprompt"]["outputSpeech"]["text"] == ""
    assert speechlet["shouldEndSession"] is True


def test_photo_speechlet_carries_image_pair():
    image = ImagePair(small="https://b.s3.amazonaws.com/s.jpg", large="https://b.s3.amazonaws.com/l.jpg")

    speechlet = build_photo_speechlet_response("Cat Photos", "Sent", "Here:", image, "", True)

    assert speechlet["card"] == {
        "type": "Standard",
        "title": "Cat Photos",
        "text": "Here:",
        "image": {
            "smallImageUrl": "https://b.s3.amazonaws.com/s.jpg",
            "largeImageUrl": "https://b.s3.amazonaws.com/l.jpg",
        },
    }
    assert speechlet["outputSpeech"]["text"] == "Sent"


def test_image_pair_large_defaults_to_small():
    assert ImagePair(small="https://x/s.jpg").large == "https://x/s.jpg"


def test_build_response_envelope_copies_attributes():
    attributes = {"seen": 1}

    envelope = build_response(attributes, {"shouldEndSession": True})
    attributes["seen"] = 2

    assert envelope == {
        "version": "1.0",
        "sessionAttributes": {"seen": 1},
        "response": {"shouldEndSession": True},
    }
    assert build_response(None, {})["sessionAttributes"] == {}
