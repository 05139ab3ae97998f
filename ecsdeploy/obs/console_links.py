"""
AWS console link builders for deployment progress messages.
"""

PUBLIC_CONSOLE_DOMAIN = "console.aws.amazon.com"
CHINA_CONSOLE_DOMAIN = "console.amazonaws.cn"


def console_domain(region: str) -> str:
    """Return the console host for a region's partition."""
    if region.startswith("cn-"):
        return CHINA_CONSOLE_DOMAIN
    return PUBLIC_CONSOLE_DOMAIN


class ConsoleLinkBuilder:
    """Builds AWS console URLs for a single region."""

    def __init__(self, region: str):
        self.region = region

    def build_ecs_service_events_url(self, cluster_name: str, service_name: str) -> str:
        """Build ECS service events console URL (partition aware)."""
        host = f"{self.region}.{console_domain(self.region)}"
        return f"https://{host}/ecs/v2/clusters/{cluster_name}/services/{service_name}/events?region={self.region}"

    def build_codedeploy_deployment_url(self, deployment_id: str) -> str:
        """Build CodeDeploy deployment console URL."""
        return f"https://{PUBLIC_CONSOLE_DOMAIN}/codesuite/codedeploy/deployments/{deployment_id}?region={self.region}"

    def ecs_deployment_message(self, cluster_name: str, service_name: str) -> str:
        url = self.build_ecs_service_events_url(cluster_name, service_name)
        return f"Deployment started. Watch this deployment's progress in the Amazon ECS console: {url}"

    def codedeploy_deployment_message(self, deployment_id: str) -> str:
        url = self.build_codedeploy_deployment_url(deployment_id)
        return f"Deployment started. Watch this deployment's progress in the AWS CodeDeploy console: {url}"
