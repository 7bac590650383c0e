from dataclasses import dataclass
from typing import Optional, Sequence

import pulumi
import pulumi_aws as aws


@dataclass
class Network:
    vpc_id: pulumi.Input[str]
    subnet_ids: pulumi.Input[Sequence[str]]


def resolve_network(vpc_stack: Optional[str] = None) -> Network:
    """Find the VPC the service runs in.

    A stack reference such as ``org/lbr-demo-vpcs/dev`` is used when given,
    otherwise the account's default VPC and its subnets.
    """
    if vpc_stack:
        vpc = pulumi.StackReference(vpc_stack)
        return Network(
            vpc_id=vpc.require_output("vpc_id"),
            subnet_ids=vpc.require_output("public_subnet_ids"),
        )

    vpc = aws.ec2.get_vpc_output(default=True)
    subnets = aws.ec2.get_subnets_output(
        filters=[
            aws.ec2.GetSubnetsFilterArgs(
                name="vpc-id",
                values=[vpc.id],
            )
        ]
    )
    return Network(vpc_id=vpc.id, subnet_ids=subnets.ids)
