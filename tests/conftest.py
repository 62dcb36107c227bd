"""Shared fixtures: sample documents and an on-disk content collection"""

import pytest


TOML_POST = """\
+++
date = "2023-05-01T09:00:00Z"
draft = false
title = 'Understanding Ownership'
tags = ['rust', 'ownership']
categories = ['tutorials']
description = "Moves, copies, and drops."
+++

# Ownership

Every value has a single owner.

```rust
let s = String::from("hello");
```
"""

YAML_POST = """\
---
title: Borrowing
date: 2023-06-01
tags: [rust, borrowing]
---

# Borrowing

References never outlive their referent.
"""

MALFORMED_POST = """\
+++
title = 'Never closed'

Body without a closing delimiter.
"""


@pytest.fixture(name="content_dir")
def content_dir_fixture(tmp_path):
    """A small collection: two valid posts, one malformed, one non-markdown file."""
    root = tmp_path / "content"
    (root / "posts").mkdir(parents=True)
    (root / "posts" / "ownership.md").write_text(TOML_POST)
    (root / "posts" / "borrowing.md").write_text(YAML_POST)
    (root / "posts" / "broken.md").write_text(MALFORMED_POST)
    (root / "README.txt").write_text("not content")
    return root
