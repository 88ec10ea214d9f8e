#!/usr/bin/env python3
"""
EC2 Launcher - Main Entry Point

Launches a single EC2 instance from the Ubuntu image that matches the
chosen region, architecture and root storage, waits for it to start and
prints its public address.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from core.exceptions import ConfigurationError, LauncherError
from core.models.config import DEFAULT_INSTANCE_TYPE, DEFAULT_SECURITY_GROUP, DEFAULT_ZONE
from core.orchestration.launch_orchestrator import LaunchOrchestrator
from core.services.config_service import ConfigService
from core.services.image_catalog import ImageCatalog
from core.services.instance_waiter import InstanceWaiter
from core.services.key_pair_service import KeyPairService
from core.services.selection_service import ParameterSelector
from core.utils.logger import setup_logging
from core.utils.prompt import ConsolePrompter
from infrastructure.aws.ec2_client import EC2Client
from infrastructure.aws.session_manager import AWSSessionManager


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog='ec2-launch',
        description='Launch a single EC2 instance and print its address',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Launch with defaults and an existing key pair
  ec2-launch --key mykey

  # Choose everything from live menus
  ec2-launch --interactive

  # 32-bit instance-store image in eu-west-1b
  ec2-launch -z eu-west-1b -a 32 -s instance -k mykey
        """
    )

    parser.add_argument(
        '-i', '--interactive',
        action='store_true',
        help='Ask for options interactively'
    )
    parser.add_argument(
        '-z', '--zone',
        metavar='AVAILABILITY_ZONE',
        help=f'Availability zone to use (default: {DEFAULT_ZONE})'
    )
    parser.add_argument(
        '-k', '--key',
        metavar='KEY_NAME',
        help='Security key name'
    )
    parser.add_argument(
        '-g', '--group',
        metavar='SECURITY_GROUP',
        help=f'Security group to launch in (default: {DEFAULT_SECURITY_GROUP})'
    )
    parser.add_argument(
        '-t', '--type',
        metavar='INSTANCE_TYPE',
        help=f'Instance type (default: {DEFAULT_INSTANCE_TYPE})'
    )
    parser.add_argument(
        '-a', '--arch',
        choices=['64', '32'],
        help='Architecture (default: 64)'
    )
    parser.add_argument(
        '-s', '--store',
        choices=['ebs', 'instance'],
        help='Root storage type (default: ebs)'
    )

    # Configuration options
    parser.add_argument(
        '--config',
        metavar='PATH',
        help='Path to a YAML configuration file'
    )
    parser.add_argument(
        '--poll-interval',
        type=float,
        metavar='SECONDS',
        help='Seconds between status checks (default: 1)'
    )
    parser.add_argument(
        '--max-attempts',
        type=int,
        metavar='N',
        help='Give up after N status checks'
    )
    parser.add_argument(
        '--timeout',
        type=float,
        metavar='SECONDS',
        help='Give up waiting after SECONDS'
    )
    parser.add_argument(
        '--skip-validation',
        action='store_true',
        help='Do not check zone, group and key against the provider before launching'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    return parser.parse_args(argv)


def build_orchestrator(config_service: ConfigService, args: argparse.Namespace,
                       default_region: str) -> LaunchOrchestrator:
    """Wire the gateway and services together."""
    settings = config_service.get_settings()

    if args.poll_interval is not None:
        settings.polling.interval_seconds = args.poll_interval
    if args.max_attempts is not None:
        settings.polling.max_attempts = args.max_attempts
    if args.timeout is not None:
        settings.polling.timeout_seconds = args.timeout

    errors = settings.validate()
    if errors:
        raise ConfigurationError(f"Invalid options: {'; '.join(errors)}")

    session_manager = AWSSessionManager(config_service.get_aws_config())
    gateway = EC2Client(session_manager, default_region=default_region)

    image_catalog = ImageCatalog(settings.images)
    prompter = ConsolePrompter()
    selector = ParameterSelector(
        gateway,
        prompter=prompter,
        key_pair_service=KeyPairService(gateway, prompter),
        max_attempts=settings.max_prompt_attempts,
        image_catalog=image_catalog,
    )

    return LaunchOrchestrator(
        gateway,
        image_catalog=image_catalog,
        selector=selector,
        waiter=InstanceWaiter(gateway, settings.polling),
        skip_validation=args.skip_validation or settings.skip_validation,
    )


async def run_launcher(args: argparse.Namespace) -> int:
    """Run the launch and print the endpoint."""
    logger = logging.getLogger(__name__)

    config_service = ConfigService()
    settings = config_service.load_settings(args.config)
    setup_logging(settings.log_level.value, settings.log_file, args.verbose)

    defaults = config_service.get_launch_defaults(
        zone=args.zone,
        security_group=args.group,
        instance_type=args.type,
        architecture=args.arch,
        storage_type=args.store,
        key_name=args.key,
    )

    orchestrator = build_orchestrator(config_service, args, defaults.region)
    result = await orchestrator.run(defaults, interactive=args.interactive)

    logger.info(f"Launch {result.launch_id} finished in {result.duration}")
    print(result.endpoint or result.handle.instance_id)
    return 0


def cli(argv: Optional[List[str]] = None) -> int:
    """Console script entry point."""
    args = parse_arguments(argv)

    try:
        return asyncio.run(run_launcher(args))
    except LauncherError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ClientError as e:
        print(f"AWS error: {e}", file=sys.stderr)
        return 1
    except BotoCoreError as e:
        print(f"AWS error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130


if __name__ == '__main__':
    sys.exit(cli())
