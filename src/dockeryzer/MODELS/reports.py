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
Models for image analysis and comparison reports.
"""
from typing import List, Optional
from pydantic import BaseModel
from .language_info import LanguageInfo, Tier


class ImageReport(BaseModel):
    """
    Structured analysis of a single image, ready to be rendered.
    """
    name: str
    tags: List[str] = []
    size: str
    size_tier: Tier
    layers: int
    layers_tier: Tier
    language: Optional[LanguageInfo] = None
    author: str = "<none>"
    created: str = ""
    os: str = ""
    suggestions: List[str] = []


class LinePart(BaseModel):
    """
    A run of text, highlighted with the color of ``tier`` when set.
    """
    text: str
    tier: Optional[Tier] = None


class ComparisonLine(BaseModel):
    """
    One comparison statement split into parts. ``winner`` and ``loser``
    name the images judged better and worse, if any.
    """
    parts: List[LinePart] = []
    winner: Optional[str] = None
    loser: Optional[str] = None

    @property
    def text(self) -> str:
        return "".join(part.text for part in self.parts)


class ComparisonReport(BaseModel):
    """
    Side by side comparison of two images.
    """
    image1: ImageReport
    image2: ImageReport
    layers: ComparisonLine
    size: ComparisonLine
    language: ComparisonLine
