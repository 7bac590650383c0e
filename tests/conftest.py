import json

import pulumi
import pytest

ACCOUNT_ID = "123456789012"
REGION = "us-east-1"


def render_statement(statement):
    # the provider collapses single-element lists to a plain string
    rendered = {}
    if statement.get("sid"):
        rendered["Sid"] = statement["sid"]
    rendered["Effect"] = statement.get("effect", "Allow")
    for key, field in (("Action", "actions"), ("Resource", "resources")):
        values = list(statement[field])
        rendered[key] = values[0] if len(values) == 1 else values
    return rendered


class DeployMocks(pulumi.runtime.Mocks):
    """Echo inputs back as state and fill in the attributes AWS would compute."""

    def __init__(self):
        self.resources = []

    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        self.resources.append(args)
        outputs = dict(args.inputs)
        resource_id = f"{args.name}-id"

        if args.typ == "pulumi:pulumi:StackReference":
            outputs["outputs"] = {
                "vpc_id": "vpc-0fromref",
                "public_subnet_ids": ["subnet-0ref1", "subnet-0ref2"],
            }
            return [args.name, outputs]

        if args.typ.startswith("aws:"):
            service = args.typ.split(":")[1].split("/")[0]
            outputs.setdefault("arn", f"arn:aws:{service}:{REGION}:{ACCOUNT_ID}:{args.name}")
            outputs.setdefault("name", args.name)

        if args.typ == "aws:ecr/repository:Repository":
            outputs["repositoryUrl"] = (
                f"{ACCOUNT_ID}.dkr.ecr.{REGION}.amazonaws.com/{outputs['name']}"
            )
        elif args.typ == "aws:iam/accessKey:AccessKey":
            outputs["secret"] = f"{args.name}-secret"
        elif args.typ == "aws:lb/loadBalancer:LoadBalancer":
            outputs["dnsName"] = f"{args.name}.{REGION}.elb.amazonaws.com"
        elif args.typ == "aws:ecs/service:Service":
            resource_id = outputs["arn"]

        return [resource_id, outputs]

    def call(self, args: pulumi.runtime.MockCallArgs):
        if args.token == "aws:iam/getPolicyDocument:getPolicyDocument":
            document = json.dumps(
                {
                    "Version": args.args.get("version", "2012-10-17"),
                    "Statement": [
                        render_statement(statement)
                        for statement in args.args.get("statements", [])
                    ],
                }
            )
            return {"id": "policy-document", "json": document, "minifiedJson": document}
        if args.token == "aws:ec2/getVpc:getVpc":
            return {
                "id": "vpc-0default",
                "arn": f"arn:aws:ec2:{REGION}:{ACCOUNT_ID}:vpc/vpc-0default",
                "cidrBlock": "172.31.0.0/16",
                "default": True,
            }
        if args.token == "aws:ec2/getSubnets:getSubnets":
            return {"id": REGION, "ids": ["subnet-0a", "subnet-0b"]}
        return {}


MOCKS = DeployMocks()
pulumi.runtime.set_mocks(MOCKS, project="ecs-deploy", stack="test", preview=False)


@pytest.fixture
def mocks():
    return MOCKS
