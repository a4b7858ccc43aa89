"""NatSpec documentation comments.

A comment is a chain of ``@tag text`` pairs. The chain recurses with the same
counter-then-leaf pattern as expressions: once ``MAX_NESTED_TAGS`` tags have
been produced the chain stops.
"""

from __future__ import annotations

import enum
from typing import Dict, Tuple

from solsynth.constants import MAX_NATSPEC_TEXT_LENGTH, MAX_NESTED_TAGS
from solsynth.generator.base import GeneratorBase, GeneratorKind
from solsynth.generator.probability import coin_flip, pick_one_of, random_ascii_string
from solsynth.utils.whiskers import render


class TagCategory(enum.Enum):
    CONTRACT = "contract"
    FUNCTION = "function"
    PUBLIC_STATE_VAR = "public_state_var"
    EVENT = "event"


class Tag(enum.Enum):
    TITLE = "@title"
    AUTHOR = "@author"
    NOTICE = "@notice"
    DEV = "@dev"
    PARAM = "@param"
    RETURN = "@return"
    INHERITDOC = "@inheritdoc"


TAG_LOOKUP: Dict[TagCategory, Tuple[Tag, ...]] = {
    TagCategory.CONTRACT: (Tag.TITLE, Tag.AUTHOR, Tag.NOTICE, Tag.DEV),
    TagCategory.FUNCTION: (Tag.NOTICE, Tag.DEV, Tag.PARAM, Tag.RETURN, Tag.INHERITDOC),
    TagCategory.PUBLIC_STATE_VAR: (Tag.NOTICE, Tag.DEV, Tag.RETURN, Tag.INHERITDOC),
    TagCategory.EVENT: (Tag.NOTICE, Tag.DEV, Tag.PARAM),
}


class NatSpecGenerator(GeneratorBase):
    kind = GeneratorKind.NATSPEC

    _template = "/// <tags>\n"
    _tag_template = "<tag> <random><?recurse> <next></recurse>"

    def __init__(self, synthesizer):
        super().__init__(synthesizer)
        self.nesting_depth = 0
        self.category = TagCategory.CONTRACT
        self.overriding = False

    def reset(self) -> None:
        self.nesting_depth = 0

    def tag_category(self, category: TagCategory, overriding: bool = False) -> None:
        """Scope the next comment; ``@inheritdoc`` needs an override relationship."""
        self.category = category
        self.overriding = overriding

    def legal_tags(self) -> Tuple[Tag, ...]:
        tags = TAG_LOOKUP[self.category]
        if not self.overriding:
            tags = tuple(t for t in tags if t is not Tag.INHERITDOC)
        return tags

    def nesting_depth_too_high(self) -> bool:
        return self.nesting_depth >= MAX_NESTED_TAGS

    def random_tag(self) -> Tag:
        return pick_one_of(self.legal_tags(), self.rand)

    def random_natspec_string(self) -> str:
        self.nesting_depth += 1
        tag = self.random_tag()
        text = random_ascii_string(MAX_NATSPEC_TEXT_LENGTH, self.rand)
        recurse = not self.nesting_depth_too_high() and coin_flip(self.rand)
        return render(self._tag_template, {
            "tag": tag.value,
            "random": text,
            "recurse": recurse,
            "next": self.random_natspec_string() if recurse else "",
        })

    def visit(self) -> str:
        self.reset()
        return render(self._template, {"tags": self.random_natspec_string()})
