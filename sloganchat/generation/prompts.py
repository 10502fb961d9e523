"""Prompt template for the first exchange of a conversation.

The first keyword a user types is a product name. It is wrapped into an
instruction asking for five short, punctuation-free ad slogans.
"""

SLOGAN_PROMPT_PREFIX = '你是一个广告投放优化师，基于商品"'
SLOGAN_PROMPT_SUFFIX = (
    '"，撰写5个新广告文案，每个文案控制在中文长度10个字以内，'
    "不要有标点符号，文案内容要有创意，能吸引人点击"
)


def build_slogan_prompt(product: str) -> str:
    """Wrap a product keyword into the slogan-writing instruction."""
    return f"{SLOGAN_PROMPT_PREFIX}{product}{SLOGAN_PROMPT_SUFFIX}"


def strip_slogan_prompt(text: str) -> str:
    """Recover the product keyword from a templated prompt.

    Each half of the wrapper is removed only where present, so text that was
    never templated comes back unchanged.
    """
    if text.startswith(SLOGAN_PROMPT_PREFIX):
        text = text[len(SLOGAN_PROMPT_PREFIX):]
    if text.endswith(SLOGAN_PROMPT_SUFFIX):
        text = text[: -len(SLOGAN_PROMPT_SUFFIX)]
    return text
