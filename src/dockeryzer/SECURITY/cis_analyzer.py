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
Runs the CIS rule set over a Dockerfile.
"""
from typing import List, Optional

from ..MODELS.cis_result import CISResult, CISReport
from .cis_rules import CISRule, DEFAULT_RULES


class CISAnalyzer:
    """
    Evaluates every registered rule, in registration order, against the
    full Dockerfile text. No rule short-circuits another.
    """
    def __init__(self, rules: Optional[List[CISRule]] = None):
        self.rules = list(rules) if rules is not None else list(DEFAULT_RULES)

    def analyze(self, dockerfile: str) -> List[CISResult]:
        """
        :param dockerfile: Raw Dockerfile content.
        :return: One result per rule.
        """
        return [rule.evaluate(dockerfile) for rule in self.rules]

    def report(self, dockerfile: str) -> CISReport:
        return CISReport(results=self.analyze(dockerfile))

    def analyze_file(self, dockerfile_path: str) -> CISReport:
        """
        Reads and analyzes a Dockerfile from disk.
        """
        with open(dockerfile_path, 'r', encoding='utf-8') as f:
            content = f.read()
        return self.report(content)


def security_score(results: List[CISResult]) -> int:
    """
    Percentage of passed rules, integer division.
    """
    return CISReport(results=results).score
