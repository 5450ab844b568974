"""The Rails 8 application template.

Turns a ``ProjectContext`` into the ordered step plan that configures a new
Rails application with:

- a pinned Ruby version (``.ruby-version``)
- PostgreSQL (or the adapter chosen at generation time)
- Bun for JavaScript bundling
- Tailwind CSS through postcss-cli (no gem)
- RSpec with Factory Bot, Faker, Shoulda Matchers and Database Cleaner
- development gems for debugging, linting and N+1 detection
- rack-cors for API readiness
- Kamal for deployment
- a Welcome controller with a landing page and a ``bin/dev`` startup script

Steps before ``install dependencies`` only touch files; everything that
needs the bundle runs after it.  Feature flags are read while a step's body
is built, so a disabled feature keeps its place in the plan with no actions.
"""

from __future__ import annotations

from typing import Any

from railsmith.actions.manifest import DependencyGroup, DependencyManifest
from railsmith.actions.models import Action
from railsmith.context import ProjectContext
from railsmith.sequencer.registry import Phase, Step, StepRegistry

from . import dsl
from .templates import TemplateRenderer

DEV = DependencyGroup.DEVELOPMENT
TEST = DependencyGroup.TEST

RSPEC_ANCHOR = "RSpec.configure do |config|\n"
RAILS_HELPER = "spec/rails_helper.rb"
LANDING_PAGE = "app/views/welcome/index.html.erb"
TAILWIND_WATCH = (
    "css: bun tailwindcss -i ./app/assets/stylesheets/application.tailwind.css "
    "-o ./app/assets/builds/application.css --watch\n"
)


class RailsTemplate:
    """Builds the step registry for one Rails project.

    Attributes:
        context: The project being scaffolded.
        renderer: Renders the file bodies stored as ``.j2`` templates.
    """

    def __init__(self, context: ProjectContext, renderer: TemplateRenderer | None = None) -> None:
        self.context = context
        self.renderer = renderer or TemplateRenderer()

    # -- Public API --------------------------------------------------------

    def build_registry(self) -> StepRegistry:
        """Return every step of the template, in execution order."""
        registry = StepRegistry()
        for name, phase, body in (
            ("bootstrap rails app", Phase.PRE_INSTALL, self._bootstrap()),
            ("add gems", Phase.PRE_INSTALL, self._add_gems()),
            ("install dependencies", Phase.INSTALL, [dsl.bundle("install")]),
            ("install javascript", Phase.POST_INSTALL, self._install_javascript()),
            ("setup api", Phase.POST_INSTALL, self._setup_api()),
            ("setup rspec", Phase.POST_INSTALL, self._setup_rspec()),
            ("setup development environment", Phase.POST_INSTALL, self._setup_development()),
            ("setup tailwind", Phase.POST_INSTALL, self._setup_tailwind()),
            ("write startup script", Phase.POST_INSTALL, self._startup_script()),
            ("setup kamal", Phase.POST_INSTALL, self._setup_kamal()),
            ("setup root route and view", Phase.POST_INSTALL, self._setup_root_route()),
            ("setup database", Phase.POST_INSTALL, self._setup_database()),
            ("initial commit", Phase.POST_INSTALL, self._initial_commit()),
        ):
            registry.register(Step(name=name, phase=phase, body=body))
        return registry

    def declare_gems(self) -> DependencyManifest:
        """Gems appended to the Gemfile before ``bundle install``."""
        manifest = DependencyManifest()
        if self.context.flag("api"):
            manifest.declare("rack-cors")
        if self.context.flag("kamal"):
            manifest.declare("kamal", require=False)

        manifest.declare("rspec-rails", DEV, TEST, version="~> 6.1")
        manifest.declare("factory_bot_rails", DEV, TEST, version="~> 6.4")
        manifest.declare("faker", DEV, TEST, version="~> 3.3")
        manifest.declare("shoulda-matchers", DEV, TEST, version="~> 5.3")
        manifest.declare("database_cleaner-active_record", DEV, TEST, version="~> 2.1")
        manifest.declare("rubocop-rspec", DEV, TEST, version="~> 3.0", require=False)

        manifest.declare("ruby-lsp", DEV, require=False)
        manifest.declare("letter_opener", DEV, version="~> 1.8")
        manifest.declare("bullet", DEV, version="~> 7.1")
        manifest.declare("better_errors", DEV, version="~> 2.10")
        manifest.declare("binding_of_caller", DEV, version="~> 1.0")
        manifest.declare("annotate", DEV, version="~> 3.2")
        manifest.declare("active_record_query_trace", DEV, version="~> 2.2")
        return manifest

    # -- Rendering ---------------------------------------------------------

    def _render(self, template_path: str) -> str:
        return self.renderer.render(template_path, self._template_context())

    def _template_context(self) -> dict[str, Any]:
        return {
            "app_name": self.context.app_name,
            "ruby_version": self.context.ruby_version,
            "database": self.context.database,
            "javascript": self.context.javascript,
        }

    # -- Step bodies -------------------------------------------------------

    def _bootstrap(self) -> list[Action]:
        """Run the framework generator itself when scaffolding from scratch."""
        if not self.context.flag("bootstrap"):
            return []
        return [
            dsl.run(
                "rails",
                "new",
                ".",
                f"--name={self.context.app_name}",
                f"--database={self.context.database}",
                f"--javascript={self.context.javascript}",
                "--skip-kamal",
                "--skip-git",
                "--skip-bundle",
            )
        ]

    def _add_gems(self) -> list[Action]:
        return [
            dsl.force_file(".ruby-version", self.context.ruby_version),
            dsl.append_file("Gemfile", self.declare_gems().render()),
        ]

    def _install_javascript(self) -> list[Action]:
        # `rails new --skip-bundle` defers the bundler installer to us.
        if not self.context.flag("bootstrap") or self.context.javascript == "importmap":
            return []
        return [dsl.rails_command(f"javascript:install:{self.context.javascript}")]

    def _setup_api(self) -> list[Action]:
        if not self.context.flag("api"):
            return []
        return [
            dsl.force_file(
                "config/initializers/cors.rb", self._render("config/initializers/cors.rb.j2")
            )
        ]

    def _setup_rspec(self) -> list[Action]:
        return [
            dsl.generate("rspec:install"),
            dsl.remove("test"),
            dsl.append_file(RAILS_HELPER, self._render("spec/shoulda_matchers.rb.j2")),
            dsl.inject_into_file(
                RAILS_HELPER, self._render("spec/database_cleaner.rb.j2"), after=RSPEC_ANCHOR
            ),
        ]

    def _setup_development(self) -> list[Action]:
        return [
            dsl.environment(
                "config.action_mailer.delivery_method = :letter_opener", env="development"
            ),
            dsl.environment(
                "config.action_mailer.perform_deliveries = true", env="development"
            ),
            dsl.initializer("bullet.rb", self._render("config/initializers/bullet.rb.j2")),
            dsl.generate("annotate:install"),
        ]

    def _setup_tailwind(self) -> list[Action]:
        if not self.context.flag("tailwind"):
            return []
        return [
            dsl.run("bun", "add", "tailwindcss", "postcss", "autoprefixer"),
            dsl.create_file("tailwind.config.js", self._render("tailwind.config.js.j2")),
            dsl.create_file("postcss.config.js", self._render("postcss.config.js.j2")),
            dsl.create_file(
                "app/assets/stylesheets/application.tailwind.css",
                self._render("app/assets/stylesheets/application.tailwind.css.j2"),
            ),
            dsl.append_file("Procfile.dev", TAILWIND_WATCH),
        ]

    def _startup_script(self) -> list[Action]:
        return [dsl.force_file("bin/dev", self._render("bin/dev.j2"), executable=True)]

    def _setup_kamal(self) -> list[Action]:
        if not self.context.flag("kamal"):
            return []
        return [dsl.bundle("exec", "kamal", "init")]

    def _setup_root_route(self) -> list[Action]:
        return [
            dsl.generate("controller", "Welcome", "index"),
            dsl.route("root 'welcome#index'"),
            dsl.force_file(LANDING_PAGE, self._render("app/views/welcome/index.html.erb.j2")),
        ]

    def _setup_database(self) -> list[Action]:
        if not self.context.flag("database_setup"):
            return []
        return [dsl.rails_command("db:create"), dsl.rails_command("db:migrate")]

    def _initial_commit(self) -> list[Action]:
        if not self.context.flag("git"):
            return []
        return [
            dsl.git("init"),
            dsl.git("add", "."),
            dsl.git("commit", "-m", self.context.commit_message),
        ]


def build_registry(context: ProjectContext) -> StepRegistry:
    """Convenience wrapper: ``RailsTemplate(context).build_registry()``."""
    return RailsTemplate(context).build_registry()
