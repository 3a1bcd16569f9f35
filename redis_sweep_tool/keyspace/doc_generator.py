"""
Documentation generator for keyspace commands.

Operator documentation: what a command touches, what it guarantees,
how it fails, and how it composes with other tools.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import sys


def _section(title: str, lines: list[str]) -> str:
    if not lines:
        return ""
    return f"## {title}\n" + "".join(f"{line}\n" for line in lines) + "\n"


def generate_doc(
    name: str,
    synopsis: str,
    description: str,
    properties: dict[str, str],
    safety: list[str],
    examples: list[dict[str, str]],
    pipelines: list[dict[str, str]],
    failure_modes: list[str],
    load: dict[str, str],
    see_also: list[str],
) -> str:
    """
    Generate operator documentation in markdown format.

    Args:
        name: Command name and brief description
        synopsis: Command syntax
        description: What the command does to the keyspace
        properties: Behavioural properties (reads/writes, ordering, ...)
        safety: Safety measures and guarantees
        examples: Practical examples with title and code
        pipelines: Shell pipelines combining the command with others
        failure_modes: Possible failures and their exit codes
        load: Notes on the load the command puts on Redis
        see_also: Related commands

    Returns:
        Markdown-formatted documentation string
    """
    doc = f"# {name}\n\n"
    doc += f"## SYNOPSIS\n```bash\n{synopsis}\n```\n\n"
    doc += f"## DESCRIPTION\n{description}\n\n"

    if properties:
        doc += "### Properties\n"
        for key, value in properties.items():
            doc += f"- **{key}**: {value}\n"
        doc += "\n"

    doc += _section("SAFETY", [f"- **{item}**" for item in safety])

    if examples:
        doc += "## EXAMPLES\n\n"
        for idx, example in enumerate(examples, 1):
            doc += f"### Example {idx}: {example['title']}\n"
            doc += f"```bash\n{example['code']}\n```\n\n"

    if pipelines:
        doc += "## PIPELINES\n\n"
        for pipeline in pipelines:
            doc += f"### {pipeline['title']}\n"
            doc += f"```bash\n{pipeline['code']}\n```\n"
            if "note" in pipeline:
                doc += f"_{pipeline['note']}_\n"
            doc += "\n"

    doc += _section("FAILURE MODES", [f"- `{mode}`" for mode in failure_modes])
    doc += _section("LOAD ON REDIS", [f"- **{key}**: {value}" for key, value in load.items()])

    if see_also:
        doc += "## SEE ALSO\n"
        doc += ", ".join(see_also)
        doc += "\n"

    return doc


def display_doc(doc_content: str) -> None:
    """
    Print documentation to stderr and exit.

    Args:
        doc_content: Markdown documentation content
    """
    print(doc_content, file=sys.stderr)
    sys.exit(0)
