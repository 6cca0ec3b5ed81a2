# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Models for CIS Docker Benchmark rule results.
"""
from typing import List, Optional
from enum import Enum
from pydantic import BaseModel


class Severity(str, Enum):
    """
    Severity attached to a failed rule.
    """
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class CISResult(BaseModel):
    """
    Outcome of a single rule against a Dockerfile.
    Passing results carry no severity and no message.
    """
    rule_id: str
    description: str
    passed: bool
    severity: Optional[Severity] = None
    message: str = ""


class CISReport(BaseModel):
    """
    Ordered results of a full analysis.
    """
    results: List[CISResult] = []

    @property
    def passed_count(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def failed(self) -> List[CISResult]:
        return [r for r in self.results if not r.passed]

    @property
    def score(self) -> int:
        """Percentage of passed rules, truncated toward zero."""
        if not self.results:
            return 0
        return (self.passed_count * 100) // len(self.results)
