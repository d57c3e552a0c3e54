"""Bot endpoints: create, update, publish, retrieve and list bots."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Iterable, Mapping

from .core import ApiModel, Core, HTTPResponse, Page


class BotMode(IntEnum):
    """How a bot runs its agents."""

    SINGLE_AGENT_WORKFLOW = 0
    MULTI_AGENT = 1


@dataclass
class BotPromptInfo:
    """The persona and prompt of a bot."""

    prompt: str = ""


@dataclass
class BotOnboardingInfo:
    """Opening line and suggested questions shown to new users."""

    prologue: str = ""
    suggested_questions: list[str] = field(default_factory=list)


@dataclass
class BotKnowledge:
    """Knowledge base configuration of a bot."""

    dataset_ids: list[str] = field(default_factory=list)
    auto_call: bool = False
    search_strategy: int = 0


@dataclass
class BotModelInfo:
    """The model a bot uses."""

    model_id: str = ""
    model_name: str = ""


@dataclass
class BotModelInfoConfig:
    """Model settings to apply when creating or updating a bot."""

    model_id: str = ""
    top_k: int = 0
    top_p: float = 0.0
    max_tokens: int = 0
    temperature: float = 0.0
    context_round: int = 0
    response_format: str = ""
    presence_penalty: float = 0.0
    frequency_penalty: float = 0.0


@dataclass
class BotPluginAPIInfo:
    """One API exposed by a plugin."""

    api_id: str = ""
    name: str = ""
    description: str = ""


@dataclass
class BotPluginInfo:
    """A plugin attached to a bot."""

    plugin_id: str = ""
    name: str = ""
    description: str = ""
    icon_url: str = ""
    api_info_list: list[BotPluginAPIInfo] = field(default_factory=list)


def _mode(value: Any) -> BotMode | int:
    number = int(value or 0)
    try:
        return BotMode(number)
    except ValueError:
        return number


def _parse_plugin(data: Mapping[str, Any]) -> BotPluginInfo:
    return BotPluginInfo(
        plugin_id=data.get("plugin_id") or "",
        name=data.get("name") or "",
        description=data.get("description") or "",
        icon_url=data.get("icon_url") or "",
        api_info_list=[
            BotPluginAPIInfo(
                api_id=api.get("api_id") or "",
                name=api.get("name") or "",
                description=api.get("description") or "",
            )
            for api in data.get("api_info_list") or []
        ],
    )


@dataclass
class Bot(ApiModel):
    """Complete information about a published bot."""

    bot_id: str = ""
    name: str = ""
    description: str = ""
    icon_url: str = ""
    create_time: int = 0
    update_time: int = 0
    version: str = ""
    prompt_info: BotPromptInfo | None = None
    onboarding_info: BotOnboardingInfo | None = None
    bot_mode: BotMode | int = BotMode.SINGLE_AGENT_WORKFLOW
    plugin_info_list: list[BotPluginInfo] = field(default_factory=list)
    model_info: BotModelInfo | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Bot:
        prompt = data.get("prompt_info")
        onboarding = data.get("onboarding_info")
        model = data.get("model_info")
        return cls(
            bot_id=data.get("bot_id") or "",
            name=data.get("name") or "",
            description=data.get("description") or "",
            icon_url=data.get("icon_url") or "",
            create_time=int(data.get("create_time") or 0),
            update_time=int(data.get("update_time") or 0),
            version=data.get("version") or "",
            prompt_info=BotPromptInfo(prompt=prompt.get("prompt") or "") if prompt else None,
            onboarding_info=BotOnboardingInfo(
                prologue=onboarding.get("prologue") or "",
                suggested_questions=list(onboarding.get("suggested_questions") or []),
            )
            if onboarding
            else None,
            bot_mode=_mode(data.get("bot_mode")),
            plugin_info_list=[_parse_plugin(p) for p in data.get("plugin_info_list") or []],
            model_info=BotModelInfo(
                model_id=model.get("model_id") or "",
                model_name=model.get("model_name") or "",
            )
            if model
            else None,
        )


@dataclass
class SimpleBot:
    """Summary of a bot as shown in listings."""

    bot_id: str = ""
    bot_name: str = ""
    description: str = ""
    icon_url: str = ""
    publish_time: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SimpleBot:
        return cls(
            bot_id=data.get("bot_id") or "",
            bot_name=data.get("bot_name") or "",
            description=data.get("description") or "",
            icon_url=data.get("icon_url") or "",
            publish_time=data.get("publish_time") or "",
        )


@dataclass
class CreatedBot(ApiModel):
    """Result of creating a bot."""

    bot_id: str = ""


@dataclass
class PublishedBot(ApiModel):
    """Result of publishing a bot."""

    bot_id: str = ""
    bot_version: str = ""


@dataclass
class UpdatedBot(ApiModel):
    """Result of updating a bot; carries only the HTTP response."""


def _data(response: HTTPResponse) -> Mapping[str, Any]:
    payload = response.payload if isinstance(response.payload, dict) else {}
    data = payload.get("data")
    return data if isinstance(data, dict) else {}


def _prompt_wire(info: BotPromptInfo | None) -> dict[str, Any] | None:
    return None if info is None else {"prompt": info.prompt}


def _onboarding_wire(info: BotOnboardingInfo | None) -> dict[str, Any] | None:
    if info is None:
        return None
    wire: dict[str, Any] = {}
    if info.prologue:
        wire["prologue"] = info.prologue
    if info.suggested_questions:
        wire["suggested_questions"] = list(info.suggested_questions)
    return wire


def _knowledge_wire(knowledge: BotKnowledge | None) -> dict[str, Any] | None:
    if knowledge is None:
        return None
    return {
        "dataset_ids": list(knowledge.dataset_ids),
        "auto_call": knowledge.auto_call,
        "search_strategy": knowledge.search_strategy,
    }


def _model_config_wire(config: BotModelInfoConfig | None) -> dict[str, Any] | None:
    if config is None:
        return None
    wire: dict[str, Any] = {"model_id": config.model_id}
    optional = {
        "top_k": config.top_k,
        "top_p": config.top_p,
        "max_tokens": config.max_tokens,
        "temperature": config.temperature,
        "context_round": config.context_round,
        "response_format": config.response_format,
        "presence_penalty": config.presence_penalty,
        "frequency_penalty": config.frequency_penalty,
    }
    wire.update({key: value for key, value in optional.items() if value})
    return wire


def _workflows_wire(workflow_ids: Iterable[str] | None) -> dict[str, Any] | None:
    if workflow_ids is None:
        return None
    return {"ids": [{"id": workflow_id} for workflow_id in workflow_ids]}


class Bots:
    """Operations on bots."""

    def __init__(self, core: Core) -> None:
        self._core = core

    def create(
        self,
        space_id: str,
        name: str,
        description: str = "",
        icon_file_id: str = "",
        prompt_info: BotPromptInfo | None = None,
        onboarding_info: BotOnboardingInfo | None = None,
        model_info_config: BotModelInfoConfig | None = None,
        workflow_ids: Iterable[str] | None = None,
    ) -> CreatedBot:
        """Create a bot in a space."""
        body = {
            "space_id": space_id,
            "name": name,
            "description": description,
            "icon_file_id": icon_file_id,
            "prompt_info": _prompt_wire(prompt_info),
            "onboarding_info": _onboarding_wire(onboarding_info),
            "model_info_config": _model_config_wire(model_info_config),
            "workflow_id_list": _workflows_wire(workflow_ids),
        }
        response = self._core.request("POST", "/v1/bot/create", body)
        result = CreatedBot(bot_id=_data(response).get("bot_id") or "")
        result.http_response = response
        return result

    def update(
        self,
        bot_id: str,
        name: str = "",
        description: str = "",
        icon_file_id: str = "",
        prompt_info: BotPromptInfo | None = None,
        onboarding_info: BotOnboardingInfo | None = None,
        knowledge: BotKnowledge | None = None,
        model_info_config: BotModelInfoConfig | None = None,
        workflow_ids: Iterable[str] | None = None,
    ) -> UpdatedBot:
        """Update the configuration of a bot."""
        body = {
            "bot_id": bot_id,
            "name": name,
            "description": description,
            "icon_file_id": icon_file_id,
            "prompt_info": _prompt_wire(prompt_info),
            "onboarding_info": _onboarding_wire(onboarding_info),
            "knowledge": _knowledge_wire(knowledge),
            "model_info_config": _model_config_wire(model_info_config),
            "workflow_id_list": _workflows_wire(workflow_ids),
        }
        response = self._core.request("POST", "/v1/bot/update", body)
        result = UpdatedBot()
        result.http_response = response
        return result

    def publish(self, bot_id: str, connector_ids: Iterable[str] = ()) -> PublishedBot:
        """Publish a bot to the given connectors."""
        body = {"bot_id": bot_id, "connector_ids": list(connector_ids)}
        response = self._core.request("POST", "/v1/bot/publish", body)
        data = _data(response)
        result = PublishedBot(
            bot_id=data.get("bot_id") or "",
            bot_version=data.get("version") or "",
        )
        result.http_response = response
        return result

    def retrieve(self, bot_id: str) -> Bot:
        """Fetch the published configuration of a bot."""
        response = self._core.request(
            "GET", "/v1/bot/get_online_info", params={"bot_id": bot_id}
        )
        bot = Bot.from_dict(_data(response))
        bot.http_response = response
        return bot

    def list(self, space_id: str, page_num: int = 0, page_size: int = 0) -> Page[SimpleBot]:
        """List the published bots of a space, one page at a time."""
        page_size = page_size or 20
        page_num = page_num or 1

        def fetch(num: int, size: int) -> tuple[list[SimpleBot], bool, int, str]:
            response = self._core.request(
                "GET",
                "/v1/space/published_bots_list",
                params={
                    "space_id": space_id,
                    "page_index": str(num),
                    "page_size": str(size),
                },
            )
            data = _data(response)
            bots = [SimpleBot.from_dict(item) for item in data.get("space_bots") or []]
            return bots, len(bots) >= size, int(data.get("total") or 0), response.log_id()

        return Page(fetch, page_num, page_size)