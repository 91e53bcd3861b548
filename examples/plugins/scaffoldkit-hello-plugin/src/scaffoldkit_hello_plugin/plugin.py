from __future__ import annotations

from scaffoldkit.domain import ActionKind, ParameterSpec, SourceAction, TemplateDescriptor, ViewDescriptor
from scaffoldkit.plugins import DescriptorRegistrar, PluginContext


class HelloPlugin:
    name = "hello"

    def register(self, registrar: DescriptorRegistrar, context: PluginContext) -> None:
        def hello_view() -> ViewDescriptor:
            return ViewDescriptor(
                id="hello.view",
                name="Hello",
                factory="scaffoldkit_hello_plugin.views:HelloView",
                region="main",
                label=f"Hello from scaffoldkit {context.settings.cli_version}",
                link="https://example.invalid/hello",
            )

        def hello_app() -> TemplateDescriptor:
            # reuses the packaged hello-world sources, so it only works against the default bundle root
            return TemplateDescriptor(
                name="Hello app",
                description="Single app.js rendered from the hello-world source",
                sources=(
                    SourceAction(
                        location="template-mobile-hello-world/app.js.template",
                        action=ActionKind.GENERATE,
                        rename="{{fileName}}/app.js",
                    ),
                ),
                parameters=(ParameterSpec(key="fileName", default_value="HelloApp", label="Application name"),),
            )

        registrar.add_view("hello.view", hello_view)
        registrar.add_template("hello-app", hello_app)


def register(registrar: DescriptorRegistrar, context: PluginContext) -> None:
    HelloPlugin().register(registrar, context)
