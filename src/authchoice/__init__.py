"""authchoice -- attach model-provider authentication to an agent runtime.

This package drives the onboarding step where a user picks *how* an AI agent
authenticates with its model provider: reuse or paste an API key, sign in
with OAuth, or register a private OpenAI-compatible endpoint. The outcome is
written into a JSON configuration (and, for secrets, into a shared ``.env``
file or the per-agent credential store).

Typical workflow::

    authchoice onboard --auth-choice openai-codex
    authchoice onboard --auth-choice openai-private-endpoint --non-interactive \\
        --openai-private-provider-id acme --openai-private-base-url https://llm.acme.dev/v1 \\
        --openai-private-api-key sk-... --openai-private-model-id acme-large

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models for the configuration file and auth options.
    config: XDG-aware config file and agent directory management.
    merge: Copy-on-write configuration transforms.
    choices: Auth-choice handlers and the dispatcher that selects them.
    auth: Environment classification, API-key helpers, OAuth flow, and
        credential storage.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
