"""Model identifiers and list prices for transcription and LLM backends.

Friendly keys (``GPT_4o_MINI``) map to vendor model ids and per-unit prices,
which feed the cost estimates logged after each call. Prices are USD and
subject to change; they are only used for log output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping


@dataclass(frozen=True)
class LLMModel:
    model_id: str
    input_cost_per_1m: float = 0.0
    output_cost_per_1m: float = 0.0


@dataclass(frozen=True)
class SpeechModel:
    model_id: str
    cost_per_minute: float = 0.0


# whisper.cpp model names -> ggml binary filenames
WHISPER_MODELS: Dict[str, str] = {
    "tiny": "ggml-tiny.bin",
    "tiny.en": "ggml-tiny.en.bin",
    "base": "ggml-base.bin",
    "base.en": "ggml-base.en.bin",
    "small": "ggml-small.bin",
    "small.en": "ggml-small.en.bin",
    "medium": "ggml-medium.bin",
    "medium.en": "ggml-medium.en.bin",
    "large-v1": "ggml-large-v1.bin",
    "large-v2": "ggml-large-v2.bin",
    "large-v3-turbo": "ggml-large-v3-turbo.bin",
    "turbo": "ggml-large-v3-turbo.bin",
}

DEEPGRAM_MODELS: Dict[str, SpeechModel] = {
    "nova-2": SpeechModel("nova-2", 0.0043),
    "nova": SpeechModel("nova", 0.0043),
    "enhanced": SpeechModel("enhanced", 0.0145),
    "base": SpeechModel("base", 0.0125),
}

ASSEMBLY_MODELS: Dict[str, SpeechModel] = {
    "best": SpeechModel("best", 0.0062),
    "nano": SpeechModel("nano", 0.0020),
}

OPENAI_MODELS: Dict[str, LLMModel] = {
    "GPT_4o_MINI": LLMModel("gpt-4o-mini", 0.15, 0.60),
    "GPT_4o": LLMModel("gpt-4o", 2.50, 10.00),
    "GPT_o1_MINI": LLMModel("o1-mini", 3.00, 12.00),
}

CLAUDE_MODELS: Dict[str, LLMModel] = {
    "CLAUDE_3_5_SONNET": LLMModel("claude-3-5-sonnet-latest", 3.00, 15.00),
    "CLAUDE_3_5_HAIKU": LLMModel("claude-3-5-haiku-latest", 0.80, 4.00),
    "CLAUDE_3_OPUS": LLMModel("claude-3-opus-latest", 15.00, 75.00),
    "CLAUDE_3_SONNET": LLMModel("claude-3-sonnet-20240229", 3.00, 15.00),
    "CLAUDE_3_HAIKU": LLMModel("claude-3-haiku-20240307", 0.25, 1.25),
}

GEMINI_MODELS: Dict[str, LLMModel] = {
    "GEMINI_1_5_FLASH_8B": LLMModel("gemini-1.5-flash-8b", 0.075, 0.30),
    "GEMINI_1_5_FLASH": LLMModel("gemini-1.5-flash", 0.15, 0.60),
    "GEMINI_1_5_PRO": LLMModel("gemini-1.5-pro", 2.50, 10.00),
}

COHERE_MODELS: Dict[str, LLMModel] = {
    "COMMAND_R": LLMModel("command-r", 0.15, 0.60),
    "COMMAND_R_PLUS": LLMModel("command-r-plus", 2.50, 10.00),
}

MISTRAL_MODELS: Dict[str, LLMModel] = {
    "MIXTRAL_8x7B": LLMModel("open-mixtral-8x7b", 0.70, 0.70),
    "MIXTRAL_8x22B": LLMModel("open-mixtral-8x22b", 2.00, 6.00),
    "MISTRAL_LARGE": LLMModel("mistral-large-latest", 2.00, 6.00),
    "MISTRAL_SMALL": LLMModel("mistral-small-latest", 0.20, 0.60),
    "MINISTRAL_8B": LLMModel("ministral-8b-latest", 0.10, 0.10),
    "MINISTRAL_3B": LLMModel("ministral-3b-latest", 0.04, 0.04),
    "MISTRAL_NEMO": LLMModel("open-mistral-nemo", 0.15, 0.15),
    "MISTRAL_7B": LLMModel("open-mistral-7b", 0.25, 0.25),
}

# Local inference; no per-token cost
OLLAMA_MODELS: Dict[str, LLMModel] = {
    "LLAMA_3_2_1B": LLMModel("llama3.2:1b"),
    "LLAMA_3_2_3B": LLMModel("llama3.2:3b"),
    "GEMMA_2_2B": LLMModel("gemma2:2b"),
    "PHI_3_5": LLMModel("phi3.5:3.8b"),
    "QWEN_2_5_0B": LLMModel("qwen2.5:0.5b"),
    "QWEN_2_5_1B": LLMModel("qwen2.5:1.5b"),
    "QWEN_2_5_3B": LLMModel("qwen2.5:3b"),
}

DEEPSEEK_MODELS: Dict[str, LLMModel] = {
    "DEEPSEEK_CHAT": LLMModel("deepseek-chat", 0.07, 1.10),
    "DEEPSEEK_REASONER": LLMModel("deepseek-reasoner", 0.14, 2.19),
}

GROK_MODELS: Dict[str, LLMModel] = {
    "GROK_2_LATEST": LLMModel("grok-2-latest", 2.00, 10.00),
}

FIREWORKS_MODELS: Dict[str, LLMModel] = {
    "LLAMA_3_1_405B": LLMModel("accounts/fireworks/models/llama-v3p1-405b-instruct", 3.00, 3.00),
    "LLAMA_3_1_70B": LLMModel("accounts/fireworks/models/llama-v3p1-70b-instruct", 0.90, 0.90),
    "LLAMA_3_1_8B": LLMModel("accounts/fireworks/models/llama-v3p1-8b-instruct", 0.20, 0.20),
    "LLAMA_3_2_3B": LLMModel("accounts/fireworks/models/llama-v3p2-3b-instruct", 0.10, 0.10),
    "QWEN_2_5_72B": LLMModel("accounts/fireworks/models/qwen2p5-72b-instruct", 0.90, 0.90),
}

TOGETHER_MODELS: Dict[str, LLMModel] = {
    "LLAMA_3_2_3B": LLMModel("meta-llama/Llama-3.2-3B-Instruct-Turbo", 0.06, 0.06),
    "LLAMA_3_1_405B": LLMModel("meta-llama/Meta-Llama-3.1-405B-Instruct-Turbo", 3.50, 3.50),
    "LLAMA_3_1_70B": LLMModel("meta-llama/Meta-Llama-3.1-70B-Instruct-Turbo", 0.88, 0.88),
    "LLAMA_3_1_8B": LLMModel("meta-llama/Meta-Llama-3.1-8B-Instruct-Turbo", 0.18, 0.18),
    "GEMMA_2_27B": LLMModel("google/gemma-2-27b-it", 0.80, 0.80),
    "GEMMA_2_9B": LLMModel("google/gemma-2-9b-it", 0.30, 0.30),
    "QWEN_2_5_72B": LLMModel("Qwen/Qwen2.5-72B-Instruct-Turbo", 1.20, 1.20),
    "QWEN_2_5_7B": LLMModel("Qwen/Qwen2.5-7B-Instruct-Turbo", 0.30, 0.30),
}

GROQ_MODELS: Dict[str, LLMModel] = {
    "LLAMA_3_2_1B_PREVIEW": LLMModel("llama-3.2-1b-preview", 0.04, 0.04),
    "LLAMA_3_2_3B_PREVIEW": LLMModel("llama-3.2-3b-preview", 0.06, 0.06),
    "LLAMA_3_3_70B_VERSATILE": LLMModel("llama-3.3-70b-versatile", 0.59, 0.79),
    "LLAMA_3_1_8B_INSTANT": LLMModel("llama-3.1-8b-instant", 0.05, 0.08),
    "MIXTRAL_8X7B_INSTRUCT": LLMModel("mixtral-8x7b-32768", 0.24, 0.24),
}


def resolve_llm_model(table: Mapping[str, LLMModel], model: str) -> LLMModel:
    """Look up a friendly key or a raw model id; unknown ids pass through unpriced."""
    if model in table:
        return table[model]
    for entry in table.values():
        if entry.model_id == model:
            return entry
    return LLMModel(model)


def estimate_llm_cost(model: LLMModel, input_tokens: int, output_tokens: int) -> float:
    return (
        input_tokens / 1_000_000 * model.input_cost_per_1m
        + output_tokens / 1_000_000 * model.output_cost_per_1m
    )
