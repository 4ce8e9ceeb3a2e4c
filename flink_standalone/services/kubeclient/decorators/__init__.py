"""
Step decorators contributing slices of pod and resource configuration.

Each decorator takes a role's parameters and decorates a ``FlinkPod``,
optionally producing accompanying resources.
"""

from .base import StepDecorator
from .cmd import CmdStandaloneJobManagerDecorator, CmdStandaloneTaskManagerDecorator
from .init import InitJobManagerDecorator, InitTaskManagerDecorator
from .mounts import (
    FlinkConfMountDecorator,
    HadoopConfMountDecorator,
    KerberosMountDecorator,
    UserLibMountDecorator,
)
from .secrets import EnvSecretsDecorator, MountSecretsDecorator
from .services import ExternalServiceDecorator, InternalServiceDecorator

__all__ = [
    'StepDecorator',
    'CmdStandaloneJobManagerDecorator',
    'CmdStandaloneTaskManagerDecorator',
    'EnvSecretsDecorator',
    'ExternalServiceDecorator',
    'FlinkConfMountDecorator',
    'HadoopConfMountDecorator',
    'InitJobManagerDecorator',
    'InitTaskManagerDecorator',
    'InternalServiceDecorator',
    'KerberosMountDecorator',
    'MountSecretsDecorator',
    'UserLibMountDecorator',
]
