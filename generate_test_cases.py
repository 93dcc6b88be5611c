"""
Story Test Case Generator
Fetches a Jira story, generates test cases (AI or rule-based) and optionally creates them in Jira
"""

import argparse
import asyncio
import json
import logging
import sys

from dotenv import load_dotenv

from story_testgen import JiraClient, JiraError, JiraSettings, LLMClient, LLMSettings
from story_testgen.generators import TestCaseOrchestrator
from story_testgen.utils.formatters import slugify
from story_testgen.workflow import StoryWorkflow


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Generate test cases for a Jira story")
    parser.add_argument("key", nargs="?", help="Story key, e.g. PROJ-123")
    parser.add_argument("--search", metavar="JQL", help="List matching issues instead of generating")
    parser.add_argument("--max-results", type=int, default=20, help="Maximum issues listed by --search")
    parser.add_argument("--no-ai", action="store_true", help="Skip the model and use rule-based generation")
    parser.add_argument("--create", action="store_true", help="Create the test cases in Jira")
    parser.add_argument("--project", help="Target project key or name (default: the story's project)")
    parser.add_argument("--output", help="JSON output file (default: test_cases_<key>.json)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)
    if not args.key and not args.search:
        parser.error("a story key or --search JQL is required")
    return args


def print_search_results(issues):
    if not issues:
        print("\nNo matching issues.")
        return
    for issue in issues:
        fields = issue.get("fields") or {}
        issue_type = (fields.get("issuetype") or {}).get("name", "")
        print(f"{issue.get('key', '?'):<12} [{issue_type}] {fields.get('summary', '')}")


def print_test_cases(test_cases):
    for tc in test_cases:
        print(f"\n{'-' * 80}")
        print(f"{tc.title}  [{tc.priority.value}]")
        print(f"{'-' * 80}")
        if tc.description:
            print(tc.description)
        print("\nSteps:")
        for i, step in enumerate(tc.steps, 1):
            print(f"  {i}. {step}")
        print(f"\nExpected: {tc.expected_result}")


async def run(args) -> int:
    try:
        jira_settings = JiraSettings.from_env()
    except ValueError as e:
        print(f"\nError: Jira configuration incomplete: {e}")
        return 2

    llm_settings = LLMSettings.from_env()
    llm = LLMClient(llm_settings)
    print(llm.status_label())

    jira = JiraClient(jira_settings)

    if args.search:
        try:
            issues = jira.search_issues(args.search, max_results=args.max_results)
        except JiraError as e:
            print(f"\nError: {e}")
            return 1
        print_search_results(issues)
        return 0

    orchestrator = TestCaseOrchestrator(llm=llm, model_timeout=llm_settings.timeout)
    workflow = StoryWorkflow(jira, orchestrator, model_available=llm.enabled and not args.no_ai)

    try:
        story = workflow.fetch_story(args.key.strip().upper())
    except JiraError as e:
        print(f"\nError: {e}")
        return 1

    print(f"\n{story.key}: {story.fields.summary}")
    outcome = await workflow.generate(story)
    if outcome.model_error:
        print(f"Model path not used: {outcome.model_error}")

    if not outcome.test_cases:
        print("\nNo test cases could be derived from this story.")
        return 1

    print(f"\nGenerated {len(outcome.test_cases)} test case(s) ({outcome.source})")
    print_test_cases(outcome.test_cases)

    output_file = args.output or f"test_cases_{slugify(story.key).replace('-', '_')}.json"
    with open(output_file, "w", encoding="utf-8") as f:
        json.dump([tc.to_dict() for tc in outcome.test_cases], f, indent=2, ensure_ascii=False)
    print(f"\nSaved to: {output_file}")

    if not args.create:
        return 0

    try:
        projects = jira.get_projects() if args.project else []
        report = workflow.create_test_cases(story, outcome.test_cases, target_project=args.project, projects=projects)
    except (ValueError, JiraError) as e:
        print(f"\nError: {e}")
        return 1

    for created in report.created:
        print(f"Created {created.key}")
    for error in report.errors:
        print(f"Error: {error}")
    return 0 if report.ok else 1


def main(argv=None) -> int:
    args = parse_args(argv)
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
