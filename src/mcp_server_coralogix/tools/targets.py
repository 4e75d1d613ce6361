"""S3 archive target tools."""

from typing import Any, Dict, List

from .. import config

S3_PROPERTIES = {
    "bucket": {
        "type": "string",
        "description": 'S3 bucket name where logs will be archived (e.g., "my-company-coralogix-archive")',
    },
    "region": {
        "type": "string",
        "description": 'AWS region where the S3 bucket is located (e.g., "us-east-1")',
    },
    "prefix": {
        "type": "string",
        "description": 'Optional S3 key prefix for archived data (e.g., "logs/")',
    },
    "isActive": {
        "type": "boolean",
        "description": "Whether archiving to this target is active (default: true)",
    },
}

TARGET_TOOLS: List[Dict[str, Any]] = [
    {
        "name": "get_target",
        "description": "Get the current archive storage target (S3 or IBM COS) configuration",
        "inputSchema": {"type": "object", "properties": {}, "required": []},
    },
    {
        "name": "set_target",
        "description": "Configure the S3 bucket used to archive logs",
        "inputSchema": {
            "type": "object",
            "properties": dict(S3_PROPERTIES),
            "required": ["bucket", "region"],
        },
    },
    {
        "name": "validate_target",
        "description": "Validate an S3 archive target before applying it",
        "inputSchema": {
            "type": "object",
            "properties": dict(S3_PROPERTIES),
            "required": ["bucket", "region"],
        },
    },
]


def build_target_request(args: Dict[str, Any]) -> Dict[str, Any]:
    s3 = {"bucket": args["bucket"], "region": args["region"]}
    if args.get("prefix"):
        s3["prefix"] = args["prefix"]
    return {"isActive": args.get("isActive", True), "s3": s3}


def describe_target(target: Dict[str, Any]) -> str:
    if target.get("s3"):
        s3 = target["s3"]
        lines = ["Type: S3", f"Bucket: {s3.get('bucket')}", f"Region: {s3.get('region')}"]
        if s3.get("prefix"):
            lines.append(f"Prefix: {s3['prefix']}")
    elif target.get("ibmCos"):
        cos = target["ibmCos"]
        lines = ["Type: IBM COS", f"Endpoint: {cos.get('endpoint')}", f"Bucket Type: {cos.get('bucketType')}"]
    else:
        return "Type: none"

    if "isActive" in target:
        lines.append(f"Active: {'🟢 Yes' if target['isActive'] else '🔴 No'}")
    return "\n".join(lines)


async def handle_target_tool(name: str, args: Dict[str, Any]) -> str:
    client = config.get_coralogix_client()

    try:
        if name == "get_target":
            response = await client.get_target()
            target = response.get("target") or {}
            if not (target.get("s3") or target.get("ibmCos")):
                return "📦 No archive storage target is configured."
            return f"📦 Current storage target\n\n{describe_target(target)}"

        if name == "set_target":
            request = build_target_request(args)
            response = await client.set_target(request)
            target = response.get("target") or request
            state = "🟢 active" if request["isActive"] else "🔴 inactive"
            return f"✅ Set storage target to S3 ({state})\n\n{describe_target(target)}"

        if name == "validate_target":
            request = build_target_request(args)
            response = await client.validate_target(request)
            if response.get("isValid"):
                return f"✅ Target validation passed for S3\n\n{describe_target(request)}"
            return f"❌ Target validation failed for S3\n\n{describe_target(request)}"

    except Exception as e:
        raise RuntimeError(f"Failed to execute targets operation: {e}") from e

    raise ValueError(f"Unknown targets tool: {name}")
