# cozekit

A Python client for the Coze bot platform HTTP API. It covers:

- **Bots** – create, update, publish, retrieve and list bots (`cozekit.bots`).
- **Conversations** – create, retrieve, list and clear conversations
  (`cozekit.conversations`).
- **Chat messages** – list the messages produced by a chat
  (`cozekit.chat_messages`).
- **Audio** – create voice rooms, synthesise speech, transcribe audio, clone
  voices and list available voices (`cozekit.audio`).
- **Messages** – models and helpers for building the messages sent to a bot
  (`cozekit.messages`).
- **Authentication** – a fixed access token (`TokenAuth`) or any object
  implementing the `Auth` interface (`cozekit.auth`).

Failed requests raise `cozekit.core.CozeAPIError`, which carries the business
`code`, the HTTP `status` and the server's `log_id`. Every response model has
a `log_id()` method returning the server's log id, which is useful when
reporting problems to the platform. List endpoints return a
`cozekit.core.Page` that fetches further pages on demand.

## Installation

```
pip install cozekit
```

Python 3.10 or later is required; the only runtime dependency is `httpx`.

## Connecting

All resource classes share a `cozekit.core.Core`, which holds the base URL,
the HTTP client and the authentication. `COM_BASE_URL` is the default;
`CN_BASE_URL` is also provided. A `Core` is a context manager and closes the
HTTP client it created on exit (a client passed in is left open):

```python
from cozekit.auth import TokenAuth
from cozekit.bots import Bots
from cozekit.conversations import Conversations
from cozekit.core import Core, CozeAPIError

with Core(auth=TokenAuth("token")) as core:
    bots = Bots(core)
    conversations = Conversations(core)
    try:
        bot = bots.retrieve("bot_id")
        print(bot.name, bot.version, bot.log_id())
    except CozeAPIError as error:
        print(error.code, error.message, error.log_id)
```

Without an explicit client, requests use an `httpx.Client` with a 5 second
timeout. Pass your own `httpx.Client` as `client=` to change that or to route
requests through a test transport.

## Listing with pages

`Bots.list`, `Conversations.list` and `AudioVoices.list` return a `Page`. The
first page is fetched immediately; `items`, `has_more`, `total` and `log_id`
describe it. Iterating over the page yields its items and then those of each
following page, for as long as the server reports more:

```python
for conversation in conversations.list("bot_id"):
    print(conversation.id, conversation.last_section_id)
```

A page number or size of 0 means the defaults: page 1, 20 items per page. For
bots and voices a page counts as having more when it came back full.

## Building messages

```python
from cozekit.messages import (
    build_user_question_text,
    build_user_question_objects,
    build_assistant_answer,
    new_text_message_object,
    new_image_message_object_by_url,
)

question = build_user_question_text("What is the weather today?", None)

multimodal = build_user_question_objects(
    [
        new_text_message_object("Describe this picture"),
        new_image_message_object_by_url("https://example.com/picture.png"),
    ],
    None,
)

history = build_assistant_answer("Hello, how can I help?", {"source": "seed"})
conversation = conversations.create(messages=[question, history], bot_id="bot_id")
```

Multimodal content is serialised into the message's `content` as a JSON list
and its content type is set to `object_string`.

## Audio

`cozekit.audio.Audio(core)` groups the audio services as `rooms`, `speech`,
`voices` and `transcriptions`:

```python
from cozekit.audio import Audio, AudioFormat

audio = Audio(core)
speech = audio.speech.create("Hello", "voice_id", response_format=AudioFormat.MP3)
speech.write_to_file("hello.mp3")

with open("hello.mp3", "rb") as sample:
    print(audio.transcriptions.create(sample, "hello.mp3").text)
```

`AudioVoices.clone` raises `ValueError` when no file is given.

## Token refresh timing

`cozekit.auth.get_refresh_before(ttl)` gives the margin, in seconds, by which
a token with the given lifetime should be refreshed before it expires: 30 for
lifetimes of ten minutes or more, 10 for a minute or more, 5 for thirty
seconds or more, and 0 otherwise.

## What this package does not do

- It does not start chats with a bot, poll or stream chat events, cancel
  chats or submit tool outputs; it only lists the messages of an existing chat.
- It has no single client object gathering every service; build a `Core` and
  pass it to each resource class.
- The only ready-made authentication is `TokenAuth`; there is no OAuth or JWT
  token issuing.

## Running the tests

```
pip install "cozekit[test]"
pytest
```