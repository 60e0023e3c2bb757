import pytest
import os
from dotenv import load_dotenv

@pytest.fixture(scope="session", autouse=True)
def _load_env():
    # Load .env once per session to avoid side-effects on import time
    load_dotenv()

def _truthy(v: str | None) -> bool:
    return v is not None and v.strip().lower() not in ("", "0", "false", "no")

@pytest.fixture(scope="session")
def allow_integration(_load_env) -> bool:
    return _truthy(os.getenv("RUN_INTEGRATION_TESTS"))

@pytest.fixture
def perplexity_raw() -> str:
    return (
        "Sources:\n"
        "1. [NASA: Moon facts](https://science.nasa.gov/moon)\n"
        "2. [Britannica - Moon](https://www.britannica.com/place/Moon)\n"
        "\n"
        "Truth: 80%\n"
        "\n"
        "Fact Check: The Moon is on average about 384,400 km from Earth [1, 2].\n"
        "\n"
        "Context: The distance varies because the orbit is elliptical [2].\n"
    )

@pytest.fixture
def groq_raw() -> str:
    return (
        "Sources:\n"
        "1. [Britannica - Moon](https://www.britannica.com/place/Moon)\n"
        "2. [ESA - Our Moon](https://www.esa.int/Science_Exploration/Moon)\n"
        "\n"
        "Truth: 60%\n"
        "\n"
        "Fact Check: The figure is an average distance [1].\n"
        "\n"
        "Context: Lunar laser ranging measures it precisely [2].\n"
    )
