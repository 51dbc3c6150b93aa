"""SugarSync CLI - Main commands."""
import asyncio
from pathlib import Path
from typing import Awaitable, Callable

import typer
from rich.console import Console

from ..client import DEFAULT_SHARE, DEFAULT_VIDEO_TYPE, SugarSyncClient
from ..core.api import APIConfig, Credentials
from ..core.exceptions import SugarSyncException, SugarSyncRequestError
from ..core.logging import configure_logging
from ..core.xml_query import pretty_print

app = typer.Typer(
    name="sugarsync",
    help="SugarSync cloud storage CLI",
    add_completion=False,
    no_args_is_help=True
)
console = Console(highlight=False, soft_wrap=True)


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def echo(text: str = "") -> None:
    """Print literal text (file names may contain markup characters)."""
    console.print(text, markup=False)


def print_error(error: SugarSyncException) -> None:
    """Print a handled error the way the legacy tool did."""
    result = error.result
    if result is not None and isinstance(error, SugarSyncRequestError):
        console.print("HTTP ERROR!", style="red", markup=False)
    else:
        console.print(error.message, style="red", markup=False)

    if result is None:
        return
    echo(f"STATUS CODE: {result.status}")
    echo(f"RESPONSE BODY:\n{pretty_print(result.body)}")


def run_command(ctx: typer.Context, action: Callable[[SugarSyncClient], Awaitable[int]]) -> None:
    """
    Authenticate, run one command and exit.

    Args:
        ctx: Typer context holding credentials and config
        action: Coroutine function receiving an authenticated client and
            returning the exit code
    """
    credentials: Credentials = ctx.obj['credentials']
    config: APIConfig = ctx.obj['config']

    async def execute() -> int:
        async with SugarSyncClient(credentials, config) as sugarsync:
            try:
                await sugarsync.authenticate()
                return await action(sugarsync)
            except SugarSyncException as e:
                print_error(e)
                return 1

    code = run_async(execute())
    if code:
        raise typer.Exit(code)


@app.callback()
def main_callback(
    ctx: typer.Context,
    user: str = typer.Option(..., "-user", help="SugarSync username (email address)"),
    password: str = typer.Option(..., "-password", help="SugarSync password"),
    application: str = typer.Option(..., "-application", help="The id of the app created from developer site"),
    accesskey: str = typer.Option(..., "-accesskey", help="Developer accessKey"),
    privatekey: str = typer.Option(..., "-privatekey", help="Developer privateAccessKey"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every request"),
):
    """SugarSync cloud storage CLI."""
    configure_logging(verbose)
    ctx.obj = {
        'credentials': Credentials(
            username=user,
            password=password,
            application=application,
            access_key=accesskey,
            private_key=privatekey,
        ),
        'config': APIConfig.default(),
    }


@app.command()
def quota(ctx: typer.Context):
    """Show storage quota."""
    async def show_quota(sugarsync: SugarSyncClient) -> int:
        info = await sugarsync.get_quota()
        echo("\n---QUOTA INFO---")
        echo(f"Total storage available: {info.limit_gb} GB")
        echo(f"Storage usage: {info.usage_gb} GB")
        echo(f"Free storage: {info.free_gb} GB")
        return 0

    run_command(ctx, show_quota)


@app.command("list")
def list_contents(
    ctx: typer.Context,
    share: str = typer.Option(None, "--share", "-s", help="List a received share instead of Magic Briefcase"),
):
    """List the Magic Briefcase folder contents."""
    async def list_folder(sugarsync: SugarSyncClient) -> int:
        if share:
            contents = await sugarsync.list_share(share)
        else:
            contents = await sugarsync.list_folder()

        echo("\nFolders:")
        for name in contents.folders:
            echo(f"\t\t{name}")
        echo("\nFiles:")
        for name in contents.files:
            echo(f"\t\t{name}")
        return 0

    run_command(ctx, list_folder)


@app.command()
def upload(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Local file to upload"),
):
    """Upload a local file into the Magic Briefcase."""
    async def do_upload(sugarsync: SugarSyncClient) -> int:
        await sugarsync.upload(path)
        echo('\nUpload completed successfully. Check "Magic Briefcase" remote folder')
        return 0

    run_command(ctx, do_upload)


@app.command()
def download(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="File in the Magic Briefcase to download"),
    dest: Path = typer.Option(Path("."), "--dest", "-d", help="Destination directory"),
):
    """Download a file from the Magic Briefcase."""
    async def do_download(sugarsync: SugarSyncClient) -> int:
        result = await sugarsync.download(name, dest)
        echo(f"\nDownload completed successfully. Saved to {result.path}")
        return 0

    run_command(ctx, do_download)


@app.command("download-videos")
def download_videos(
    ctx: typer.Context,
    folder: str = typer.Argument(..., help="Subfolder of the share to download"),
    share: str = typer.Option(DEFAULT_SHARE, "--share", "-s", help="Received share name"),
    media_type: str = typer.Option(DEFAULT_VIDEO_TYPE, "--media-type", "-m", help="Media type to download"),
    dest: Path = typer.Option(Path("."), "--dest", "-d", help="Destination directory"),
):
    """Download every video of a received share's subfolder.

    Exits with the number of files downloaded.
    """
    async def do_download(sugarsync: SugarSyncClient) -> int:
        videos = await sugarsync.find_videos(share, folder, media_type)
        echo(f"\n{folder} found.")
        echo(f"\n{len(videos)} files found for download.")
        if not videos:
            echo(f"\nFolder {folder}/ does not contain any videos.")
            return 0

        for video in videos:
            echo(f"Begin Download of {video.display_name}")
            await sugarsync.download_file(video, dest)
            echo("Done.")

        echo(f"\nDownload completed successfully. The contents of {folder}"
             f"/ was downloaded to the local directory.")
        return len(videos)

    run_command(ctx, do_download)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
