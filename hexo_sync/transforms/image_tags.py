"""Hexo ``fb_img`` image tags.

Posts reference images with a tag plugin call such as::

    {% fb_img \\image\\posts\\my-post\\diagram.webp "Diagram" %}

Obsidian cannot render these, so ``rewrite_image_tags`` swaps each tag for a
plain Markdown image pointing at a resource supplied by a lookup function.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

import inflection

# {% fb_img \image\posts\<post>\<file> "<alt>" %}
TAG_PATTERN = re.compile(r'\{% fb_img \\image\\posts\\([^\\"]+)\\([^\\"]+) "([^"]+)" %\}')

ImageLookup = Callable[[str], Optional[str]]


@dataclass
class TagReplacement:
    """A tag that was resolved and replaced."""
    tag: str
    name: str
    alt: str
    resource: str


@dataclass
class RewriteResult:
    """Rewritten text plus what was and wasn't resolved."""
    text: str
    replacements: List[TagReplacement] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)


def rewrite_image_tags(text: str, lookup: ImageLookup) -> RewriteResult:
    """Replace resolvable image tags with Markdown images.

    Args:
        text: Raw post content
        lookup: Maps "<post>/<file>" to a displayable resource, or None

    Returns:
        RewriteResult; unresolved tags are left as they were
    """
    replacements: List[TagReplacement] = []
    missing: List[str] = []

    def replace_tag(match: re.Match) -> str:
        post, file_name, alt = match.group(1), match.group(2), match.group(3)
        name = f"{post}/{file_name}"

        resource = lookup(name)
        if resource is None:
            missing.append(name)
            return match.group(0)

        replacements.append(TagReplacement(tag=match.group(0), name=name, alt=alt, resource=resource))
        return f"![{alt}]({resource})"

    result = TAG_PATTERN.sub(replace_tag, text)
    return RewriteResult(text=result, replacements=replacements, missing=missing)


def vault_image_lookup(image_root: Path) -> ImageLookup:
    """Create a lookup resolving tag names against the vault's image folder.

    Args:
        image_root: Vault directory holding one folder per post

    Returns:
        A lookup returning the image's POSIX path, or None if it doesn't
        exist or resolves outside image_root
    """
    image_root = Path(image_root)

    def lookup(name: str) -> Optional[str]:
        candidate = image_root.joinpath(*name.split('/'))
        if not candidate.resolve().is_relative_to(image_root.resolve()):
            return None
        if candidate.is_file():
            return candidate.as_posix()
        return None
    return lookup


def image_file_name(name: str, extension: str) -> str:
    """File name for an image saved under a user-chosen name.

    The name is slugged; names with no ASCII letters or digits are kept as-is.
    """
    slug = inflection.parameterize(name) or name.strip()
    ext = extension if extension.startswith('.') else f".{extension}"
    return f"{slug}{ext.lower()}"


def build_image_tag(post_name: str, image_name: str, alt: str) -> str:
    """Render the tag that embeds image_name from the post's image folder.

    Raises:
        ValueError: If a part contains a character the tag syntax can't hold
    """
    for label, value in (('post name', post_name), ('image name', image_name)):
        if '\\' in value or '"' in value:
            raise ValueError(f"{label} must not contain backslashes or double quotes: {value}")
    if '"' in alt:
        raise ValueError(f"alt text must not contain double quotes: {alt}")

    return f'{{% fb_img \\image\\posts\\{post_name}\\{image_name} "{alt}" %}}'
