"""Assembly of the final :class:`GenerationInfo` handed to the emitter."""

import logging
from collections.abc import Sequence

from ogen_postgen.models import (
    ErrorHandlerPolicy,
    GenerationInfo,
    ImportDescriptor,
    MethodGroup,
    PartitionResult,
)

logger = logging.getLogger(__name__)


def assemble(
    imports: Sequence[ImportDescriptor],
    result: PartitionResult,
    policy: ErrorHandlerPolicy = ErrorHandlerPolicy.SEPARATE,
) -> GenerationInfo:
    """Merge imports and partition output into one :class:`GenerationInfo`.

    The error handler is placed according to ``policy``:

    - ``separate``: kept in ``GenerationInfo.error_handler``.
    - ``splice``: appended to every group; kept separate when there is
      no group to append it to.
    - ``drop``: left out of the output.
    """
    policy = ErrorHandlerPolicy(policy)
    handler = result.error_handler
    groups = tuple(result.groups)
    error_handler = None

    if handler is not None:
        if policy is ErrorHandlerPolicy.SPLICE and not groups:
            logger.info('No groups to splice %s into, keeping it separate', handler.name)
            error_handler = handler
        elif policy is ErrorHandlerPolicy.SPLICE:
            groups = tuple(
                MethodGroup(name=group.name, methods=group.methods + (handler,))
                for group in groups
            )
        elif policy is ErrorHandlerPolicy.SEPARATE:
            error_handler = handler
        else:
            logger.info('Dropping %s from the generated output', handler.name)

    return GenerationInfo(
        imports=tuple(imports),
        groups=groups,
        error_handler=error_handler,
        policy=policy,
    )
