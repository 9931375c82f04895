"""
AI anomaly detection over whole hospital datasets, delegating judgment to an external chat completion classifier with bounded retries and lenient reply parsing.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.ai.detector import detect
from engine.ai.parsing import extract_array

__all__ = ["detect", "extract_array"]
