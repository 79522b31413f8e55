"""Built-in server profiles."""

from __future__ import annotations

from toolwire.config.models import ServerProfile

EXA = ServerProfile(
    name="exa",
    label="Exa",
    env_prefix="EXA_MCP",
    client_name="toolwire-exa-mcp",
    default_endpoint="https://mcp.exa.ai/mcp",
    default_tools=["web_search_exa", "get_code_context_exa"],
    auth="query",
    api_key_param="exaApiKey",
    api_key_envs=["EXA_API_KEY", "EXA_MCP_API_KEY"],
)

FIRECRAWL = ServerProfile(
    name="firecrawl",
    label="Firecrawl",
    env_prefix="FIRECRAWL_MCP",
    client_name="toolwire-firecrawl-mcp",
    default_endpoint="https://mcp.firecrawl.dev/v2/mcp",
    default_tools=[
        "firecrawl_scrape",
        "firecrawl_batch_scrape",
        "firecrawl_check_batch_status",
        "firecrawl_map",
        "firecrawl_search",
        "firecrawl_crawl",
        "firecrawl_check_crawl_status",
        "firecrawl_extract",
    ],
    auth="bearer",
    api_key_placeholder="{FIRECRAWL_API_KEY}",
    api_key_envs=["FIRECRAWL_API_KEY"],
)

PROFILES: dict[str, ServerProfile] = {p.name: p for p in (EXA, FIRECRAWL)}


def get_profile(name: str) -> ServerProfile:
    try:
        return PROFILES[name]
    except KeyError:
        msg = f"Unknown profile: {name!r} (known: {', '.join(sorted(PROFILES))})"
        raise ValueError(msg) from None
