from .vectors import Transform, RayHit, as_vec3, intersect_ray_plane
from .tree import TreeNode, find_first_by_name, find_all_by_name, format_hierarchy
from .confignode import ConfigNode, ConfigSyntaxError, parse_config, load_config
from .curve import FloatCurve, Keyframe
from .config_values import (
    get_string,
    get_strings,
    get_bool,
    get_bools,
    get_int,
    get_float,
    get_double,
    get_floats,
    get_vector3,
    get_curve,
)
from .assembly import Assembly, AssemblyError, AttachPoint, GroupController, Part, PartModule
from .rescale import PointUpdate, RescaleReport, rescale_attach_point, rescale_attachments, rescale_part
from .dispatch import (
    DispatchFailure,
    DispatchReport,
    Editing,
    GroupScan,
    Inactive,
    RuntimeContext,
    Simulating,
    collect_group_members,
    discover_group,
    dispatch_grouped,
    dispatch_grouped_controllers,
)
from .settings import PartkitSettings, get_settings, set_settings, reset_settings

__all__ = [
    'Transform',
    'RayHit',
    'as_vec3',
    'intersect_ray_plane',
    'TreeNode',
    'find_first_by_name',
    'find_all_by_name',
    'format_hierarchy',
    'ConfigNode',
    'ConfigSyntaxError',
    'parse_config',
    'load_config',
    'FloatCurve',
    'Keyframe',
    'get_string',
    'get_strings',
    'get_bool',
    'get_bools',
    'get_int',
    'get_float',
    'get_double',
    'get_floats',
    'get_vector3',
    'get_curve',
    'Assembly',
    'AssemblyError',
    'AttachPoint',
    'GroupController',
    'Part',
    'PartModule',
    'PointUpdate',
    'RescaleReport',
    'rescale_attach_point',
    'rescale_attachments',
    'rescale_part',
    'DispatchFailure',
    'DispatchReport',
    'Editing',
    'GroupScan',
    'Inactive',
    'RuntimeContext',
    'Simulating',
    'collect_group_members',
    'discover_group',
    'dispatch_grouped',
    'dispatch_grouped_controllers',
    'PartkitSettings',
    'get_settings',
    'set_settings',
    'reset_settings',
]
