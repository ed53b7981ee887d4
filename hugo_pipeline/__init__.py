"""CDK constructs and app for hosting a Hugo site behind a deployment pipeline."""
