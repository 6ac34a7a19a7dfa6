#!/usr/bin/env python3
"""
Roadtripper - Navigate Street View along a planned route and capture screenshots

Usage:
    python -m roadtripper navigate <project> [options]
    python -m roadtripper map <project> [options]

navigate options:
    --debug           Show the browser window and log debug messages
    --watch           Open a page that shows images as they are captured

map options:
    --output FILE     Output HTML file (default: <project>/route_map.html)
    --no-open         Don't open the map in a browser
"""

import argparse
import asyncio
import os
import signal
import sys
import webbrowser

from .config import NavigatorConfig, load_env_file
from .errors import ProjectError, RoadtripperError
from .logger import Logger
from .navigator import Navigator
from .project import Project
from .route_map import create_map, list_captures
from .session import BrowserSession
from .state import load_state
from .watch import ImageWatcher

EXIT_CANCELLED = 130


async def _navigate(project: Project, route, config: NavigatorConfig, logger: Logger,
                    debug: bool, on_capture) -> bool:
    async with BrowserSession(config, logger, headless=not debug) as session:
        navigator = Navigator(route, session, project.state_file, project.image_path,
                              config=config, logger=logger, on_capture=on_capture)
        loop = asyncio.get_running_loop()
        try:
            loop.add_signal_handler(signal.SIGINT, navigator.cancel)
        except (NotImplementedError, RuntimeError):
            pass  # no signal handlers on this platform; Ctrl+C aborts instead
        try:
            return await navigator.run()
        finally:
            try:
                loop.remove_signal_handler(signal.SIGINT)
            except (NotImplementedError, RuntimeError):
                pass


def navigate(project_path: str, debug: bool = False, watch: bool = False) -> int:
    project = Project.from_path(project_path)
    try:
        project.check_exists()
    except ProjectError as e:
        print(e, file=sys.stderr)
        return 1

    load_env_file(".env")
    load_env_file(os.path.join(project.path, ".env"))

    logger = Logger(project.log_file, verbose=debug)
    try:
        config = NavigatorConfig.from_env()
        config.require_api_key()
        logger.info(f"Project {project.name}", config.to_dict())

        route = project.load_route()
        logger.info(f"Loaded route with {len(route)} waypoints")
        if project.ensure_image_dir():
            logger.info(f"Creating images directory: {project.image_path}")

        on_capture = None
        if watch:
            on_capture = ImageWatcher(project.path, project.name, config.watch_refresh)

        completed = asyncio.run(_navigate(project, route, config, logger, debug, on_capture))
    except RoadtripperError as e:
        logger.fatal(str(e))
        return 1
    except Exception as e:
        logger.fatal(f"Navigation failed: {e!r}")
        raise
    finally:
        logger.close()

    return 0 if completed else EXIT_CANCELLED


def render_map(project_path: str, output: str = None, open_browser: bool = True) -> int:
    project = Project.from_path(project_path)
    try:
        project.check_exists()
        route = project.load_route()
        state = load_state(project.state_file)
    except RoadtripperError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    captures = list_captures(project.image_path)
    m = create_map(route, state, captures)
    output = output or os.path.join(project.path, "route_map.html")
    m.save(output)
    print(f"Map saved to: {output} ({len(captures)} captures, step {state.step}/{len(route) - 1})")
    if open_browser:
        webbrowser.open(f"file://{os.path.abspath(output)}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="roadtripper",
        description="Navigate Street View and capture time-lapse screenshots"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    nav = subparsers.add_parser("navigate", help="Navigate and capture screenshots for a project")
    nav.add_argument("path", help="Project directory containing route.json")
    nav.add_argument("--debug", action="store_true",
                     help="Show the browser window and log debug messages")
    nav.add_argument("--watch", action="store_true",
                     help="Open a page that shows images as they are captured")

    map_parser = subparsers.add_parser("map", help="Render route progress to an HTML map")
    map_parser.add_argument("path", help="Project directory containing route.json")
    map_parser.add_argument("--output", "-o", metavar="FILE",
                            help="Output HTML file (default: <project>/route_map.html)")
    map_parser.add_argument("--no-open", action="store_true",
                            help="Don't open the map in a browser")

    args = parser.parse_args(argv)

    if args.command == "navigate":
        return navigate(args.path, debug=args.debug, watch=args.watch)
    return render_map(args.path, output=args.output, open_browser=not args.no_open)


if __name__ == "__main__":
    sys.exit(main())
