"""
Responsibility: locate a readable file for a requested path and classify its content.

Directories are searched for an index file, regular files are read whole and must be UTF-8
text. Every filesystem failure is folded into Missing or Unreadable, nothing is raised.
"""

import enum
import os
import stat
from dataclasses import dataclass
from typing import Final, List, Optional, Set, Tuple, Union

INDEX_FILES: Final[Tuple[str, ...]] = ("index.html", "index.shtml", "index.txt")
HTML_EXTENSION: Final[str] = ".html"

class ContentType(enum.Enum):
    HTML = "html"
    PLAIN = "plain"

    @property
    def mime_type(self) -> str:
        return f"text/{self.value}"

@dataclass(frozen=True)
class Missing:
    """
    Nothing exists at the path, or a directory holds no index file
    """

@dataclass(frozen=True)
class Unreadable:
    """
    Something exists at the path but could not be served
    """
    reason: str = ""

@dataclass(frozen=True)
class Found:
    body: bytes
    content_type: ContentType

ResolvedResource = Union[Missing, Unreadable, Found]

def content_type_for(path: str) -> ContentType:
    # Case-sensitive: index.HTML is served as plain text
    if os.path.splitext(path)[1] == HTML_EXTENSION:
        return ContentType.HTML

    return ContentType.PLAIN

def read_resource(path: str) -> Union[Unreadable, Found]:
    try:
        with open(path, "rb") as f:
            body = f.read()
        body.decode("utf-8")
    except UnicodeDecodeError:
        return Unreadable("not UTF-8 text")
    except OSError as e:
        return Unreadable(e.strerror or str(e))
    except ValueError as e:
        # Embedded NUL bytes are rejected by the OS layer before any syscall
        return Unreadable(str(e))

    return Found(body=body, content_type=content_type_for(path))

def resolve(path: str) -> ResolvedResource:
    """
    Walks the request path depth-first, descending into directories through INDEX_FILES in order.

    The first candidate that can be read wins. If none can, the result is Unreadable when any
    candidate existed but failed, otherwise Missing. Each directory is entered at most once, so
    a symlink pointing back at an ancestor ends the walk as Unreadable instead of looping.
    """
    pending: List[str] = [path]
    visited: Set[Tuple[int, int]] = set()
    failure: Optional[Unreadable] = None

    while pending:
        candidate = pending.pop()

        try:
            info = os.stat(candidate)
        except (FileNotFoundError, NotADirectoryError):
            continue
        except OSError as e:
            # ELOOP and permission errors on a parent directory land here
            failure = failure or Unreadable(e.strerror or str(e))
            continue
        except ValueError as e:
            failure = failure or Unreadable(str(e))
            continue

        if stat.S_ISDIR(info.st_mode):
            key = (info.st_dev, info.st_ino)
            if key in visited:
                failure = failure or Unreadable("directory cycle")
                continue
            visited.add(key)

            # Stack is LIFO, push in reverse so index.html is tried first
            pending.extend(os.path.join(candidate, name) for name in reversed(INDEX_FILES))
            continue

        if not stat.S_ISREG(info.st_mode):
            failure = failure or Unreadable("not a regular file")
            continue

        resource = read_resource(candidate)
        if isinstance(resource, Found):
            return resource
        failure = failure or resource

    if failure is not None:
        return failure

    return Missing()

def confine(path: str, web_root: str) -> Optional[str]:
    """
    Maps a request path onto web_root, returning None if it would escape the root
    """
    root = os.path.abspath(web_root)
    file_path = os.path.normpath(os.path.join(root, path.lstrip("/")))

    if os.path.commonpath([file_path, root]) != root:
        return None

    return file_path
