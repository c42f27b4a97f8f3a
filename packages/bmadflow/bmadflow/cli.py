"""Command-line entry point: ``bmadflow`` / ``python -m bmadflow``."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Any

from bmadflow.config.provider import DEFAULT_CONFIG_PATH, ConfigProvider
from bmadflow.core.errors import BmadError
from bmadflow.runtime.agent_loader import AgentLoader, format_agent_for_display
from bmadflow.runtime.collaboration import get_collaborators
from bmadflow.runtime.documents import DocumentSource
from bmadflow.runtime.routing import route_to_agent
from bmadflow.schemas.validation import ValidationIssue
from bmadflow.templates.store import (
    CATEGORY_DESCRIPTIONS,
    TemplateStore,
    generate_content,
    parse_variables,
)
from bmadflow.validation.engine import RULE_CHECKERS, validate_workflow
from bmadflow.validation.naming import NameKind, validate_name

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def _print_issue(issue: ValidationIssue) -> None:
    print(f"  [{issue.level.value}] {issue.message}")
    print(f"    Rule: {issue.rule} | Location: {issue.location}")
    if issue.suggestion:
        print(f"    Suggestion: {issue.suggestion}")
    if issue.expression:
        print(f"    Expression: {issue.expression}")


def _cmd_validate_workflow(args: argparse.Namespace, config: ConfigProvider) -> int:
    source = DocumentSource.from_config(config)
    workflow = source.load_raw_workflow_document(args.file)
    enabled = {name: not getattr(args, f"no_{name}") for name in RULE_CHECKERS}
    report = validate_workflow(workflow, config.get_naming_convention(), **enabled)

    if args.format == "json":
        _print_json({"file": args.file, "workflow": workflow.get("name"), **report.to_dict()})
        return report.exit_code(args.strict)

    print(f"Validation: {workflow.get('name') or args.file}")
    sections = [("Errors", report.errors), ("Warnings", report.warnings)]
    if args.verbose:
        sections.append(("Info", report.infos))
    for title, issues in sections:
        if issues:
            print(f"\n{title}")
            for issue in issues:
                _print_issue(issue)

    print(f"\nErrors: {report.error_count}")
    print(f"Warnings: {report.warning_count}")
    print(f"Info: {report.info_count}")
    print("Validation PASSED" if report.passed else "Validation FAILED")
    return report.exit_code(args.strict)


def _cmd_validate_naming(args: argparse.Namespace, config: ConfigProvider) -> int:
    convention = config.get_naming_convention()
    issues = validate_name(args.name, args.type, convention)
    if not issues:
        print("Name follows all conventions")
    else:
        print(f"Found {len(issues)} convention issues:")
        for issue in issues:
            _print_issue(issue)
    print(f"\nWorkflow prefix: {convention.workflow_prefix}")
    print(f"Credential prefix: {convention.credential_prefix}")
    print(f"Use snake_case: {'Yes' if convention.use_snake_case else 'No'}")
    return EXIT_OK


def _cmd_agent_list(args: argparse.Namespace, config: ConfigProvider) -> int:
    loader = AgentLoader.from_config(config)
    if args.filter:
        agents = loader.find_agents_by_expertise(args.filter)
        rows = [format_agent_for_display(a) for a in agents]
    else:
        rows = [s.model_dump() for s in loader.list_agents()]

    if args.format == "json":
        _print_json(rows)
        return EXIT_OK
    for row in rows:
        status = "Error" if row.get("error") else "OK"
        print(f"{row['id']:<16} {row['name']:<24} {row['role']:<28} {status}")
    return EXIT_OK


def _cmd_agent_info(args: argparse.Namespace, config: ConfigProvider) -> int:
    agent = AgentLoader.from_config(config).load_agent(args.agent_id)
    _print_json(format_agent_for_display(agent, detailed=True))
    return EXIT_OK


def _cmd_agent_menu(args: argparse.Namespace, config: ConfigProvider) -> int:
    loader = AgentLoader.from_config(config)
    agent_id = args.agent_id or config.default_agent()
    menu = loader.get_menu(agent_id)
    if menu is None or not menu.sections:
        print(f"No menu defined for agent: {agent_id}")
        return EXIT_OK
    for section in menu.sections:
        print(f"-- {section.name} --")
        for command in section.commands:
            print(f"  [{command.key}] {command.description}")
    return EXIT_OK


def _cmd_agent_route(args: argparse.Namespace, config: ConfigProvider) -> int:
    loader = AgentLoader.from_config(config)
    result = route_to_agent(args.query, loader, master_id=config.default_agent())
    if result is None:
        print("No specific agent recommended for this query.")
        return EXIT_OK
    print(f"Agent: {result.agent.name}")
    print(f"Role: {result.agent.role}")
    print(f"Reason: {result.reason}")
    print(f'Matched: "{result.matched_keyword}"')
    return EXIT_OK


def _cmd_agent_collaborators(args: argparse.Namespace, config: ConfigProvider) -> int:
    loader = AgentLoader.from_config(config)
    for collaborator in get_collaborators(args.agent_id, loader):
        print(f"{collaborator.id:<16} {collaborator.name:<24} {collaborator.relationship or ''}")
    return EXIT_OK


def _cmd_template_list(args: argparse.Namespace, config: ConfigProvider) -> int:
    templates = TemplateStore.from_config(config).list(args.category)
    for category, items in templates.items():
        print(f"{category} ({len(items)})")
        for item in items:
            print(f"  {item.name:<32} {item.title}")
    return EXIT_OK


def _cmd_template_show(args: argparse.Namespace, config: ConfigProvider) -> int:
    template = TemplateStore.from_config(config).get(args.category, args.name)
    print(f"# {template.title} ({template.category}/{template.file})")
    if template.variables:
        print(f"Variables: {', '.join(template.variables)}")
    print()
    print(template.content)
    return EXIT_OK


def _cmd_template_categories(args: argparse.Namespace, config: ConfigProvider) -> int:
    for category in TemplateStore.from_config(config).categories:
        print(f"  {category:<15} {CATEGORY_DESCRIPTIONS.get(category, '')}")
    print('\nUse "bmadflow template list -c <category>" to see templates in a category')
    return EXIT_OK


def _cmd_template_generate(args: argparse.Namespace, config: ConfigProvider) -> int:
    template = TemplateStore.from_config(config).get(args.category, args.name)
    variables = parse_variables(args.var)
    missing = [v for v in template.variables if v not in variables]
    if missing:
        logger.info("Unfilled template variables: %s", ", ".join(missing))
    content = generate_content(template.content, variables)

    if args.preview:
        print(content)
        return EXIT_OK

    output = args.output or f"./{Path(template.file).stem}-{int(time.time() * 1000)}.md"
    output_path = Path(output).resolve()
    if output_path.exists() and not args.force:
        print(f"Error: {output_path} already exists (use --force to overwrite)", file=sys.stderr)
        return EXIT_FAILED
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding="utf-8")
    print(f"Generated: {output_path}")
    return EXIT_OK


def _cmd_config_check(args: argparse.Namespace, config: ConfigProvider) -> int:
    result = config.validate()
    for error in result.errors:
        print(f"  {error}")
    print("Configuration valid" if result.valid else "Configuration invalid")
    return EXIT_OK if result.valid else EXIT_FAILED


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bmadflow",
        description="Agent personas, templates, and workflow validation for n8n teams",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to module.yaml")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    commands = parser.add_subparsers(dest="command", required=True)

    validate = commands.add_parser("validate", help="Validate workflows and names")
    validate_sub = validate.add_subparsers(dest="subcommand", required=True)

    workflow = validate_sub.add_parser("workflow", help="Validate a workflow JSON file")
    workflow.add_argument("file", help="Path to workflow JSON file")
    for name in RULE_CHECKERS:
        workflow.add_argument(
            f"--no-{name}", action="store_true", help=f"Skip {name} validation"
        )
    workflow.add_argument("--strict", action="store_true", help="Treat warnings as errors")
    workflow.add_argument("-f", "--format", choices=("text", "json"), default="text")
    workflow.set_defaults(handler=_cmd_validate_workflow)

    naming = validate_sub.add_parser("naming", help="Check a name against conventions")
    naming.add_argument("name")
    naming.add_argument(
        "-t", "--type", choices=[k.value for k in NameKind], default=NameKind.WORKFLOW.value
    )
    naming.set_defaults(handler=_cmd_validate_naming)

    agent = commands.add_parser("agent", help="Agent persona operations")
    agent_sub = agent.add_subparsers(dest="subcommand", required=True)

    agent_list = agent_sub.add_parser("list", help="List available agents")
    agent_list.add_argument("--filter", help="Filter agents by keyword")
    agent_list.add_argument("-f", "--format", choices=("text", "json"), default="text")
    agent_list.set_defaults(handler=_cmd_agent_list)

    info = agent_sub.add_parser("info", help="Show details of an agent")
    info.add_argument("agent_id")
    info.set_defaults(handler=_cmd_agent_info)

    menu = agent_sub.add_parser("menu", help="Show an agent's command menu")
    menu.add_argument("agent_id", nargs="?")
    menu.set_defaults(handler=_cmd_agent_menu)

    route = agent_sub.add_parser("route", help="Find the best agent for a task")
    route.add_argument("query")
    route.set_defaults(handler=_cmd_agent_route)

    collaborators = agent_sub.add_parser("collaborators", help="List an agent's collaborators")
    collaborators.add_argument("agent_id")
    collaborators.set_defaults(handler=_cmd_agent_collaborators)

    template = commands.add_parser("template", help="Template catalogue")
    template_sub = template.add_subparsers(dest="subcommand", required=True)
    template_list = template_sub.add_parser("list", help="List templates by category")
    template_list.add_argument("-c", "--category", help="Filter categories")
    template_list.set_defaults(handler=_cmd_template_list)
    template_show = template_sub.add_parser("show", help="Print a template")
    template_show.add_argument("category")
    template_show.add_argument("name")
    template_show.set_defaults(handler=_cmd_template_show)
    template_sub.add_parser("categories", help="List template categories").set_defaults(
        handler=_cmd_template_categories
    )
    generate = template_sub.add_parser("generate", help="Fill a template with variables")
    generate.add_argument("category")
    generate.add_argument("name")
    generate.add_argument(
        "--var", action="append", default=[], metavar="KEY=VALUE",
        help="Variable value (repeatable)",
    )
    target = generate.add_mutually_exclusive_group()
    target.add_argument("--preview", action="store_true", help="Print instead of saving")
    target.add_argument("-o", "--output", help="Output file path")
    generate.add_argument("--force", action="store_true", help="Overwrite an existing file")
    generate.set_defaults(handler=_cmd_template_generate)

    config_cmd = commands.add_parser("config", help="Configuration checks")
    config_sub = config_cmd.add_subparsers(dest="subcommand", required=True)
    config_sub.add_parser("check", help="Validate module.yaml").set_defaults(
        handler=_cmd_config_check
    )

    return parser


def _configure_logging(verbose: bool, config: ConfigProvider) -> None:
    if verbose:
        level = logging.DEBUG
    else:
        level_name = str(config.get_value("logging.level", "info")).upper()
        level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = ConfigProvider(args.config)
    try:
        _configure_logging(args.verbose, config)
        return args.handler(args, config)
    except BmadError as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
