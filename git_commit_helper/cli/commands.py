"""CLI Commands"""

import argparse
import logging
from dataclasses import replace
from pathlib import Path

from git_commit_helper import LANGUAGE_MODES
from git_commit_helper.ai import AIError, create_default_service, create_service, default_model, translate_with_fallback
from git_commit_helper.config import (
    ConfigError, ConfigManager, ServiceConfig, SERVICE_NAMES, display_name, mask_secret,
)
from git_commit_helper.git import GitRepo
from git_commit_helper.hook import install_git_hook, process_commit_msg
from git_commit_helper.interactive import ask, confirm, select
from git_commit_helper.output import bold, dim, info, print_error, print_section, print_success, print_warning
from git_commit_helper.review import review_changes, review_remote_changes

logger = logging.getLogger(__name__)

SETUP_TEST_TEXT = "这是一个测试消息，用于验证翻译功能是否正常。"
LANGUAGE_LABELS = {"bilingual": "Bilingual (English + Chinese)", "en": "English", "zh": "Chinese"}


def _service_label(config, index: int) -> str:
    service = config.services[index]
    marker = f" {dim('(default)')}" if service.service == config.default_service else ""
    return f"{service.display_name}{marker}"


def prompt_service_config(service: str, existing: ServiceConfig | None = None) -> ServiceConfig:
    """Ask for key, endpoint and model of one service."""
    existing = existing or ServiceConfig(service=service)
    print(f"\n{bold(display_name(service))}")
    api_key = ask("API key", default=existing.api_key, allow_empty=False)
    endpoint = ask("API endpoint (Enter for the default)", default=existing.api_endpoint or "")
    model = ask(f"Model (Enter for {default_model(service)})", default=existing.model or "")
    return ServiceConfig(
        service=service,
        api_key=api_key,
        api_endpoint=endpoint or None,
        model=model or None,
    )


def _choose_new_service() -> str | None:
    keys = list(SERVICE_NAMES)
    idx = select("Choose the AI service to add", [SERVICE_NAMES[k] for k in keys])
    return None if idx is None else keys[idx]


def _choose_configured(config, prompt: str) -> int | None:
    if not config.services:
        raise ConfigError("No AI service configured. Run: git-commit-helper service add")
    return select(prompt, [_service_label(config, i) for i in range(len(config.services))])


def _print_test_hints(error: Exception) -> None:
    print_error(f"Test failed: {error}")
    print("\nPlease check:")
    print("  1. the API key is correct")
    print("  2. the API endpoint is reachable")
    print("  3. the network connection works")
    print(f"  4. the details printed with {bold('--debug')}")


def run_setup(manager: ConfigManager) -> int:
    """Interactive setup wizard."""
    config = manager.load()
    print(f"\n{bold('Setup Wizard')}")
    print(f"{dim('Config file:')} {manager.path}")

    if config.services:
        print("\nConfigured AI services:")
        for i in range(len(config.services)):
            print(f"  {i + 1}. {_service_label(config, i)}")
        adding = confirm("Add another AI service?", default=False)
    else:
        adding = True

    while adding:
        service = _choose_new_service()
        if service is None:
            break
        config.add_service(prompt_service_config(service, config.get_service(service)))
        adding = confirm("Add another AI service?", default=False)

    if not config.services:
        print_error("No AI service configured, nothing saved")
        return 1

    if len(config.services) > 1:
        idx = _choose_configured(config, "Choose the default AI service")
        if idx is not None:
            config.set_default(idx)

    idx = select("Commit message language", [LANGUAGE_LABELS[m] for m in LANGUAGE_MODES],
                 default=LANGUAGE_MODES.index(config.language))
    if idx is not None:
        config.language = LANGUAGE_MODES[idx]
    config.ai_review = confirm("Review staged changes with AI when committing?", default=config.ai_review)

    path = manager.save(config)
    print_success(f"Config saved to {path}")

    if confirm("Test the default service now?", default=True):
        try:
            client = create_default_service(config)
            result = client.translate(SETUP_TEST_TEXT)
        except AIError as e:
            _print_test_hints(e)
            return 1
        print(f"\n{dim('Source:')}      {SETUP_TEST_TEXT}")
        print(f"{dim('Translation:')} {result}")
        print_success("Setup complete")
    return 0


def display_config(manager: ConfigManager) -> int:
    """Print the config path and contents with API keys masked."""
    config = manager.load()
    print(f"\n{bold('Current Configuration')}\n")
    print(f"  {dim('Config file:')} {manager.path}{'' if manager.exists() else dim(' (not created yet)')}")
    print()
    print(f"  {bold('Settings:')}")
    print(f"    default_service:  {info(display_name(config.default_service))}")
    print(f"    ai_review:        {info(str(config.ai_review).lower())}")
    print(f"    language:         {info(config.language)}")
    print(f"    log_field:        {info(str(config.log_field).lower())}")
    print(f"    test_suggestions: {info(str(config.test_suggestions).lower())}")
    print(f"    timeout_seconds:  {info(str(config.timeout_seconds))}")
    print(f"    max_tokens:       {info(str(config.max_tokens))}")
    print(f"    max_diff_chars:   {info(str(config.max_diff_chars))}")

    print(f"\n  {bold('Services:')}")
    if not config.services:
        print(f"    {dim('none')}")
    for i, service in enumerate(config.services, 1):
        print(f"    {i}. {_service_label(config, i - 1)}")
        print(f"       API key:  {mask_secret(service.api_key)}")
        if service.api_endpoint:
            print(f"       Endpoint: {service.api_endpoint}")
        print(f"       Model:    {service.model or dim(default_model(service.service) + ' (default)')}")

    if config.gerrit:
        print(f"\n  {bold('Gerrit:')}")
        if config.gerrit.username:
            print(f"    username: {config.gerrit.username}")
        if config.gerrit.password:
            print(f"    password: {mask_secret(config.gerrit.password)}")
        if config.gerrit.token:
            print(f"    token:    {mask_secret(config.gerrit.token)}")
    print()
    return 0


def list_services(manager: ConfigManager) -> int:
    config = manager.load()
    if not config.services:
        print("No AI services configured")
        return 0
    print("Configured AI services:")
    for i in range(len(config.services)):
        print(f"  [{i + 1}] {_service_label(config, i)}")
    return 0


def run_service(args: argparse.Namespace, manager: ConfigManager) -> int:
    config = manager.load()
    action = args.service_command

    if action == 'add':
        service = _choose_new_service()
        if service is None:
            return 0
        if config.get_service(service) and not confirm(
                f"{display_name(service)} is already configured. Replace it?", default=False):
            return 0
        config.add_service(prompt_service_config(service))
        print_success(f"Added {display_name(service)}")

    elif action == 'edit':
        idx = _choose_configured(config, "Choose the service to edit")
        if idx is None:
            return 0
        current = config.services[idx]
        config.services[idx] = prompt_service_config(current.service, current)
        print_success(f"Updated {current.display_name}")

    elif action == 'remove':
        idx = _choose_configured(config, "Choose the service to remove")
        if idx is None:
            return 0
        removed = config.remove_service(idx)
        print_success(f"Removed {removed.display_name}")

    elif action == 'set-default':
        idx = _choose_configured(config, "Choose the default service")
        if idx is None:
            return 0
        config.set_default(idx)
        print_success(f"Default service is now {display_name(config.default_service)}")

    manager.save(config)
    return 0


def run_test(text: str, manager: ConfigManager) -> int:
    """Translate text with one chosen service to check its settings."""
    config = manager.load()
    idx = _choose_configured(config, "Choose the service to test")
    if idx is None:
        return 0
    service = config.services[idx]
    print(f"Testing {service.display_name}...")
    try:
        result = create_service(service, config).translate(text)
    except AIError as e:
        _print_test_hints(e)
        return 1

    print(f"\n{dim('Source:')}      {text}")
    if not result:
        print_warning("Received an empty translation")
    print(f"{dim('Translation:')} {result}")
    print_success("Test passed")
    return 0


def run_translate(args: argparse.Namespace, manager: ConfigManager) -> int:
    config = manager.load()
    content = Path(args.file).read_text(encoding='utf-8') if args.file else args.text
    if not content.strip():
        print_error("Nothing to translate")
        return 1
    print(f"Translating with {display_name(config.default_service)}...")
    result = translate_with_fallback(config, content)
    print(f"\n{dim('Source:')}\n{content.strip()}")
    print(f"\n{dim('Translation:')}\n{result}")
    return 0


def run_ai_review(args: argparse.Namespace, manager: ConfigManager) -> int:
    config = manager.load()
    if args.enable or args.disable:
        config.ai_review = bool(args.enable)
        manager.save(config)
        print_success(f"AI review {'enabled' if config.ai_review else 'disabled'}")
        return 0
    state = "enabled" if config.ai_review else "disabled"
    print(f"AI review is {bold(state)}")
    return 0


def run_review(args: argparse.Namespace, manager: ConfigManager) -> int:
    config = manager.load()
    if args.url:
        report = review_remote_changes(config, args.url)
    else:
        # An explicit review request ignores the hook-time switch
        report = review_changes(replace(config, ai_review=True), GitRepo())
        if report is None:
            print_error("No staged changes to review. Run 'git add' first.")
            return 1
    print_section("AI Code Review", report)
    return 0


def run_install(args: argparse.Namespace) -> int:
    hook_path = install_git_hook(args.path, force=args.force)
    print_success(f"Git hook installed at {hook_path}")
    return 0


def run_hook(args: argparse.Namespace, manager: ConfigManager) -> int:
    config = manager.load()
    if not config.is_configured:
        logger.warning("No AI service configured, leaving the commit message unchanged")
        return 0
    process_commit_msg(args.file, config, no_review=args.no_review)
    return 0
