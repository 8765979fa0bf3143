from flightfinder.llm.client import ModelInvoker

SUMMARY_SYSTEM = (
    "You are an AI travel agent named {agent_name}, help the user understand "
    "their flight options in an easy to consume way."
)


def build_summary_prompt(digest: str, agent_name: str) -> str:
    system = SUMMARY_SYSTEM.format(agent_name=agent_name)
    return f"{system}\n\nUser: {digest}\n\nAssistant:"


async def summarize_offers(model: ModelInvoker, digest: str, agent_name: str,
                           max_tokens: int = 500, temperature: float = 0.7) -> str:
    # display-only text, returned verbatim
    return await model.invoke(build_summary_prompt(digest, agent_name),
                              max_tokens=max_tokens, temperature=temperature)
