import asyncio
import os

from gemini_translate import ConfigError, GeminiTranslator, TranslatorConfig


async def main() -> None:
    async with GeminiTranslator() as translator:
        # Missing API key fails before any request is sent
        try:
            await translator.translate("hi", "en", "fr", config={"apiBaseUrl": "example.com"})
        except ConfigError as e:
            print("Expected error:", type(e).__name__, e)

        api_key = os.environ.get("GEMINI_API_KEY")
        if not api_key:
            return

        config = TranslatorConfig(
            api_key=api_key,
            api_base_url="generativelanguage.googleapis.com/v1beta",
        )
        result = await translator.translate(
            "Der schnelle braune Fuchs springt über den faulen Hund.",
            "auto",
            "en",
            config=config,
            result_sink=lambda text: print("partial:", text),
        )
        print("final:", result)


if __name__ == "__main__":
    asyncio.run(main())
