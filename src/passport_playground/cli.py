"""CLI entry point for passport-playground."""

import json
from pathlib import Path

import click

from passport_playground.config import get_settings
from passport_playground.drafts import GlobalDraftStore, RequestDraft
from passport_playground.generator.code import CodeLanguage, CodeTemplateParams, generate_code
from passport_playground.parser.openapi import SpecError, fetch_openapi_spec, load_openapi_file
from passport_playground.playground import EndpointView, Playground, build_playground


def _load_playground(spec_path: Path | None) -> Playground:
    settings = get_settings()
    try:
        if spec_path is not None:
            doc = load_openapi_file(spec_path)
        else:
            doc = fetch_openapi_spec(settings.openapi_url, timeout=settings.request_timeout_sec)
    except SpecError as exc:
        raise click.ClickException(str(exc)) from exc
    return build_playground(doc, default_scorer_id=settings.passport_scorer_id)


def _parse_pairs(pairs: tuple[str, ...], option: str) -> dict[str, str]:
    """Turn ``name=value`` options into a dict (later pairs win)."""
    result = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected name=value, got {pair!r}", param_hint=option)
        result[name] = value
    return result


def _draft_for(view: EndpointView, playground: Playground, path: tuple[str, ...], query: tuple[str, ...]) -> RequestDraft:
    draft = RequestDraft(
        view.endpoint,
        view.base_url,
        GlobalDraftStore(),
        default_scorer_id=playground.default_scorer_id,
    ).mount()
    for name, value in _parse_pairs(path, "--path-param").items():
        draft.set_path_param(name, value)
    for name, value in _parse_pairs(query, "--query-param").items():
        draft.set_query_param(name, value)
    return draft


def _find(playground: Playground, slug: str) -> EndpointView:
    view = playground.find(slug)
    if view is None:
        raise click.ClickException(f"Unknown endpoint: {slug}")
    return view


spec_option = click.option(
    "--spec", "spec_path", default=None, type=click.Path(exists=True, path_type=Path),
    help="Local OpenAPI file (JSON or YAML) instead of the remote document.",
)
path_option = click.option("-p", "--path-param", "path", multiple=True, help="Path parameter as name=value.")
query_option = click.option("-q", "--query-param", "query", multiple=True, help="Query parameter as name=value.")


@click.group()
def main():
    """Passport API playground: browse endpoints, build URLs and send proxied requests."""
    pass


@main.command()
@click.option("--host", default="127.0.0.1", help="Interface to bind.")
@click.option("--port", default=8000, type=int, help="Port to listen on.")
def serve(host: str, port: int):
    """Run the proxy and JSON API server."""
    import uvicorn

    from passport_playground.app import configure_logging, create_app

    configure_logging(get_settings())
    uvicorn.run(create_app(), host=host, port=port)


@main.command()
@spec_option
def endpoints(spec_path: Path | None):
    """List endpoints grouped by section."""
    playground = _load_playground(spec_path)
    for item in playground.navigation:
        click.echo(item.display_name)
        for view in item.endpoints:
            auth = " (auth)" if view.requires_auth else ""
            click.echo(f"  {view.method:<6} {view.slug:<28} {view.display_name}{auth}")


@main.command()
@click.argument("slug")
@path_option
@query_option
@spec_option
def url(slug: str, path: tuple[str, ...], query: tuple[str, ...], spec_path: Path | None):
    """Print the request URL for an endpoint."""
    playground = _load_playground(spec_path)
    draft = _draft_for(_find(playground, slug), playground, path, query)
    click.echo(draft.url)


@main.command()
@click.argument("slug")
@path_option
@query_option
@click.option("--body", default=None, help="JSON request body.")
@click.option("--origin", default=None, help="Playground server origin (default: PLAYGROUND_ORIGIN).")
@spec_option
def send(slug: str, path: tuple[str, ...], query: tuple[str, ...], body: str | None, origin: str | None, spec_path: Path | None):
    """Send a request for an endpoint through the playground proxy."""
    playground = _load_playground(spec_path)
    draft = _draft_for(_find(playground, slug), playground, path, query)

    if not draft.can_send():
        missing = [
            p.name for p in draft.endpoint.params_in("path") if p.required and not draft.path_params.get(p.name)
        ] + [
            p.name for p in draft.endpoint.params_in("query") if p.required and not draft.query_params.get(p.name)
        ]
        raise click.ClickException(f"Missing required parameters: {', '.join(missing)}")

    try:
        payload = json.loads(body) if body else None
    except json.JSONDecodeError as exc:
        raise click.BadParameter(str(exc), param_hint="--body") from exc
    result = draft.send(origin or get_settings().origin, payload)
    click.echo(json.dumps(result.model_dump(), indent=2))


@main.command()
@click.argument("slug")
@path_option
@query_option
@click.option("--lang", default="curl", type=click.Choice([lang.value for lang in CodeLanguage]), help="Sample language.")
@click.option("--api-key", default="YOUR_API_KEY", help="Key shown in the sample.")
@spec_option
def code(slug: str, path: tuple[str, ...], query: tuple[str, ...], lang: str, api_key: str, spec_path: Path | None):
    """Print a code sample for an endpoint."""
    playground = _load_playground(spec_path)
    draft = _draft_for(_find(playground, slug), playground, path, query)
    params = CodeTemplateParams(method=draft.endpoint.method, url=draft.url, api_key=api_key)
    click.echo(generate_code(lang, params, draft.endpoint.id))
