"""
Narrated script generator.

Turns a video title into a long-form narration script by researching the
topic, drafting with an LLM, validating the draft and saving it to a flat
file library.  The usual entry point is `ScriptOrchestrator`:

```python
from scriptgen import GenerationRequest, ScriptOrchestrator, Settings

orchestrator = ScriptOrchestrator.from_settings(Settings.from_env())
result = orchestrator.generate(GenerationRequest(title="Every Fighter Jet Generation Explained"))
```
"""

from .config import Settings  # noqa: F401
from .errors import ConfigurationError, PersistenceError, ProviderError, ScriptGenError  # noqa: F401
from .models import GenerationRequest, GenerationResult  # noqa: F401
from .orchestrator import PipelineState, ScriptOrchestrator  # noqa: F401

__all__ = [
    "ConfigurationError",
    "GenerationRequest",
    "GenerationResult",
    "PersistenceError",
    "PipelineState",
    "ProviderError",
    "ScriptGenError",
    "ScriptOrchestrator",
    "Settings",
]
