"""
Pandorabots command-line client

Usage:
    pbcli --app-id APP --user-key KEY --cmd list
    pbcli --app-id APP --user-key KEY --name mybot --cmd upload --file rules.aiml
    pbcli --app-id APP --user-key KEY --name mybot --cmd talk

Credentials default to PANDORABOTS_APP_ID / PANDORABOTS_USER_KEY.
Exit code 1 means a usage error, 2 a failed list or interactive talk.
"""
import argparse
import asyncio
import logging
import sys
from typing import List, Optional, TextIO

from api import (
    PandorabotsClient,
    new_client,
    set_credentials,
    set_error_log,
    set_trace_log,
    set_url,
)
from config import get_config
from exceptions import PandorabotsException
from utils.logging import build_sink_logger, set_command_context, setup_logging

logger = logging.getLogger('pbcli')

COMMANDS = [
    'list', 'createBot', 'deleteBot', 'listFiles', 'download',
    'upload', 'downloadBot', 'deleteFile', 'verify', 'talk'
]


def build_parser() -> argparse.ArgumentParser:
    config = get_config()
    parser = argparse.ArgumentParser(prog='pbcli', description='Manage and talk to Pandorabots bots')
    parser.add_argument('--app-id', default=config.app_id, help='Application ID as received from Pandorabots')
    parser.add_argument('--user-key', default=config.user_key, help='User key as received from Pandorabots')
    parser.add_argument('--url', default=config.url, help='Service URL')
    parser.add_argument('--name', default='', help='The bot name to use')
    parser.add_argument('--out', default='', help='Output file. If not specified will write to standard output')
    parser.add_argument('--file', default='', help='Input file for uploads or file name for downloads')
    parser.add_argument('--input', default='', help='Input to talk')
    parser.add_argument('--cmd', default='', help=f"The command to execute, one of: {'/'.join(COMMANDS)}")
    parser.add_argument('--debug', action='store_true', default=config.debug, help='Debug output')
    return parser


def _print_error(error: Exception) -> None:
    print(error)


async def _talk_loop(client: PandorabotsClient, name: str, stdin: TextIO) -> int:
    """Talk line by line until EOF or 'exit', carrying the session along."""
    session_id = 0
    for line in stdin:
        text = line.rstrip('\r\n')
        if text.lower() == 'exit':
            break
        try:
            reply = await client.talk(name, text, session_id=session_id)
        except PandorabotsException as e:
            _print_error(e)
            return 2
        session_id = reply.session_id
        for response in reply.responses:
            print(response)
    return 0


async def run_command(client: PandorabotsClient, args: argparse.Namespace, stdin: TextIO) -> int:
    """Run the selected command, returning the process exit code."""
    cmd = args.cmd.lower()
    name = args.name

    if cmd != 'list' and not name:
        print("You must specify the bot name")
        return 1

    try:
        if cmd == 'list':
            try:
                bots = await client.list_bots()
            except PandorabotsException as e:
                _print_error(e)
                return 2
            for bot in bots:
                print(bot)
        elif cmd == 'createbot':
            await client.create_bot(name)
            print("Bot successfully created.")
        elif cmd == 'deletebot':
            await client.delete_bot(name)
            print("Bot successfully deleted.")
        elif cmd == 'upload':
            if not args.file:
                print("You must specify the file name to upload")
                return 1
            await client.upload_file_from_path(name, args.file)
            print("File successfully uploaded.")
        elif cmd == 'download':
            if args.out:
                await client.get_file_to_path(name, args.out)
                print("File successfully downloaded.")
            elif args.file:
                await client.get_file(name, args.file, sys.stdout.buffer)
                sys.stdout.buffer.flush()
            else:
                print("You must specify the file name to download")
                return 1
        elif cmd == 'deletefile':
            if not args.file:
                print("You must specify the file name to delete")
                return 1
            await client.delete_file(name, args.file)
            print("File successfully deleted.")
        elif cmd == 'listfiles':
            print(await client.list_files(name))
        elif cmd == 'downloadbot':
            if args.out:
                await client.download_files_to_path(name, args.out)
                print("Bot files successfully downloaded.")
            else:
                await client.download_files(name, sys.stdout.buffer)
                sys.stdout.buffer.flush()
        elif cmd == 'verify':
            await client.verify(name)
            print("Bot verified.")
        elif cmd == 'talk':
            if not args.input:
                return await _talk_loop(client, name, stdin)
            reply = await client.talk(name, args.input)
            print(reply)
        else:
            print(f"Command [{args.cmd}] was not recognized")
    except (PandorabotsException, OSError) as e:
        logger.debug(f"Command {cmd} failed: {e}")
        _print_error(e)
    return 0


async def run(argv: Optional[List[str]] = None, stdin: Optional[TextIO] = None) -> int:
    """Parse argv, build the client and run the command."""
    args = build_parser().parse_args(argv)
    config = get_config()
    setup_logging(config.log_level, config.log_json_path or None)

    options = [
        set_error_log(build_sink_logger('pbcli.errors')),
        set_credentials(args.app_id, args.user_key),
        set_url(args.url),
    ]
    if args.debug:
        options.append(set_trace_log(build_sink_logger('pbcli.trace', prefix='TRACE: ')))

    try:
        client = new_client(*options)
    except PandorabotsException as e:
        _print_error(e)
        return 1

    set_command_context(command=args.cmd, bot_name=args.name, app_id=args.app_id)
    async with client:
        return await run_command(client, args, stdin if stdin is not None else sys.stdin)


def main(argv: Optional[List[str]] = None) -> int:
    return asyncio.run(run(argv))


if __name__ == '__main__':
    sys.exit(main())
