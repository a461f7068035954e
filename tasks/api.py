from pathlib import Path

from invoke import task
from invoke.context import Context

from tasks.common import project_root

api_root = project_root / Path("api")

env_template = {
    "GOOGLE_CLOUD_PROJECT": "< >",
    "FIRESTORE_LISTINGS_COLLECTION": "listings",
    "FIREBASE_API_KEY": "< >",
    "FIREBASE_PROJECT_ID": "< >",
    "LISTINGS_PAGE_SIZE": "9",
    "LOGLEVEL": "INFO",
}


@task
def init_env(ctx: Context) -> None:
    """Install the marketplace API with its test and dev extras"""
    with ctx.cd(project_root):
        print("Install marketplace API in editable mode")
        ctx.run('pip install -e ".[test,dev]"')


@task(help={"init": "install the package before running the server"})
def run(ctx: Context, init: bool = False) -> None:
    """Run the marketplace API server"""
    if init:
        init_env(ctx)
    with ctx.cd(api_root):
        print("Starting marketplace API server")
        ctx.run("python -m marketplace.app")


@task(help={"emulator_host": "host:port of a running Firestore emulator"})
def run_with_emulator(ctx: Context, emulator_host: str = "localhost:8081") -> None:
    """Run the marketplace API server against the Firestore emulator"""
    with ctx.cd(api_root):
        print(f"Starting marketplace API server against Firestore emulator at {emulator_host}")
        ctx.run("python -m marketplace.app", env={"FIRESTORE_EMULATOR_HOST": emulator_host})


@task
def generate_env_template(ctx: Context) -> None:
    """Write api/.env with placeholders for the variables the API server reads"""
    env_file = api_root / ".env"
    if env_file.exists():
        print(f"{env_file} already exists, not overwriting")
        return
    env_file.write_text("".join(f"{key}={value}\n" for key, value in env_template.items()))
    print(f"Wrote {env_file}")


@task
def test(ctx: Context) -> None:
    """Run marketplace API tests"""
    with ctx.cd(project_root):
        print("Run marketplace API tests")
        ctx.run("pytest tests || pytest --last-failed tests")
