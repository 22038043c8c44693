"""Pytest configuration and shared fixtures for the mdxslate test suite.

This module provides shared fixtures, Hypothesis profiles and marker
registration used across the unit and integration tests.
"""

import os

import pytest

# Configure Hypothesis for property-based testing
try:
    from hypothesis import Phase, Verbosity, settings

    settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
    settings.register_profile("dev", max_examples=20)
    settings.register_profile(
        "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
    )

    settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))
except ImportError:
    # Hypothesis not installed, skip configuration
    pass


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "fuzzing: Property-based tests driven by Hypothesis")


@pytest.fixture
def sample_mdx() -> str:
    """Provide an MDX document exercising every supported node type.

    Returns
    -------
    str
        MDX source with headings, lists, code, quotes, links, images and JSX.

    """
    return """# Sample **Document**

This is a *sample* paragraph with `inline code`, a [link](https://example.com "Example")
and an ![image](https://example.com/cat.png "A cat").

## Lists

* First item
* Second item with **bold**
  * Nested item

1. Step one
2. Step two

> Quoted text
> over two lines.

```python
def hello():
    print("Hello, World!")
```

***

<YouTube id="1234" />

<Note kind="info">

Some *Markdown* inside a component.

</Note>

Inline <span>markup</span> stays in the paragraph.
"""


@pytest.fixture
def heading_scenario() -> str:
    """Provide the heading and paragraph scenario document."""
    return "# Hello, __world!__\n\nPara one.\n"
