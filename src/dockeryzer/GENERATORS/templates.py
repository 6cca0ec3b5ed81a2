# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Fallback Dockerfile templates used when no LLM is available.
"""
from jinja2 import Environment

from ..MODELS.project_technology import ProjectTechnology

_env = Environment(keep_trailing_newline=True, autoescape=False)

VITE_TEMPLATE = """{{ comment("Build stage") }}FROM node:alpine AS builder
WORKDIR /workspace/app
COPY --chown=node:node . /workspace/app
RUN npm ci --only=production && npm run build && npm cache clean --force

{{ comment("Production stage") }}FROM node:alpine
COPY --from=builder --chown=node:node /workspace/app/dist /app
WORKDIR /app
USER node
CMD ["npx", "serve", "-p", "3000", "-s", "/app"]
{{ comment("Example: docker run -p 3000:3000 image-name") }}"""

NODE_BUILD_TEMPLATE = """{{ comment("Build stage") }}FROM node:alpine AS builder
WORKDIR /workspace/app
COPY --chown=node:node . .
RUN npm ci --only=production && npm run build && npm cache clean --force

{{ comment("Production stage") }}FROM node:alpine
WORKDIR /workspace/app
COPY --from=builder --chown=node:node /workspace/app/dist .
USER node
ENTRYPOINT ["npm", "run", "start"]
{{ comment("Example: docker run -p 3000:3000 image-name") }}"""

NODE_TEMPLATE = """{{ comment("Build stage") }}FROM node:alpine AS builder
WORKDIR /workspace/app
COPY --chown=node:node package*.json ./
RUN npm ci --only=production && npm cache clean --force
COPY --chown=node:node . .

{{ comment("Production stage") }}FROM node:alpine
WORKDIR /workspace/app
COPY --from=builder --chown=node:node /workspace/app .
USER node
ENTRYPOINT ["npm", "run", "start"]
{{ comment("Example: docker run -p 3000:3000 image-name") }}"""

PYTHON_TEMPLATE = """{{ comment("Use Python slim image") }}FROM python:3.11-slim
{{ comment("Set working directory") }}WORKDIR /app

{{ comment("Copy and install dependencies") }}COPY requirements.txt .
RUN pip install --no-cache-dir -r requirements.txt

{{ comment("Copy application code") }}COPY . .

{{ comment("Run the application") }}CMD ["python", "app.py"]
{{ comment("Example: docker run -p 8000:8000 image-name") }}"""

GO_TEMPLATE = """{{ comment("Build stage") }}FROM golang:alpine AS builder
WORKDIR /app
{{ comment("Download dependencies") }}COPY go.mod go.sum ./
RUN go mod download
{{ comment("Build the application") }}COPY . .
RUN CGO_ENABLED=0 GOOS=linux go build -o main .

{{ comment("Production stage") }}FROM alpine:latest
WORKDIR /app
{{ comment("Copy binary from builder") }}COPY --from=builder /app/main .
{{ comment("Run the application") }}CMD ["./main"]
{{ comment("Example: docker run -p 8080:8080 image-name") }}"""

JAVA_GRADLE_TEMPLATE = """{{ comment("Build stage") }}FROM gradle:jdk17-alpine AS builder
WORKDIR /app
COPY . .
RUN gradle build --no-daemon

{{ comment("Production stage") }}FROM eclipse-temurin:17-jre-alpine
WORKDIR /app
COPY --from=builder /app/build/libs/*.jar app.jar
CMD ["java", "-jar", "app.jar"]
"""

JAVA_MAVEN_TEMPLATE = """{{ comment("Build stage") }}FROM maven:3.9-eclipse-temurin-17-alpine AS builder
WORKDIR /app
COPY pom.xml .
RUN mvn dependency:go-offline
COPY src ./src
RUN mvn package -DskipTests

{{ comment("Production stage") }}FROM eclipse-temurin:17-jre-alpine
WORKDIR /app
COPY --from=builder /app/target/*.jar app.jar
CMD ["java", "-jar", "app.jar"]
"""

RUST_TEMPLATE = """{{ comment("Build stage") }}FROM rust:alpine AS builder
WORKDIR /app
COPY Cargo.toml Cargo.lock ./
RUN mkdir src && echo "fn main() {}" > src/main.rs && cargo build --release && rm -rf src
COPY . .
RUN cargo build --release

{{ comment("Production stage") }}FROM alpine:latest
WORKDIR /app
COPY --from=builder /app/target/release/app .
CMD ["./app"]
"""

PHP_LARAVEL_TEMPLATE = """FROM php:8.2-fpm-alpine
WORKDIR /app
RUN docker-php-ext-install pdo pdo_mysql
COPY --from=composer:latest /usr/bin/composer /usr/bin/composer
COPY composer.json composer.lock ./
RUN composer install --no-dev --optimize-autoloader
COPY . .
CMD ["php-fpm"]
"""

PHP_TEMPLATE = """FROM php:8.2-apache
WORKDIR /var/www/html
RUN docker-php-ext-install pdo pdo_mysql
COPY . .
RUN chown -R www-data:www-data /var/www/html
CMD ["apache2-foreground"]
"""

RUBY_RAILS_TEMPLATE = """FROM ruby:3.2-alpine
WORKDIR /app
COPY Gemfile Gemfile.lock ./
RUN bundle install --without development test
COPY . .
RUN bundle exec rake assets:precompile
CMD ["rails", "server", "-b", "0.0.0.0"]
"""

RUBY_TEMPLATE = """FROM ruby:3.2-alpine
WORKDIR /app
COPY Gemfile Gemfile.lock ./
RUN bundle install
COPY . .
CMD ["ruby", "app.rb"]
"""

DOCKERIGNORE_CONTENT = """node_modules
npm-debug.log
.git
.gitignore
.env
.venv
venv
__pycache__
*.pyc
dist
build
target
coverage
.idea
.vscode
.DS_Store
Dockerfile*
docker-compose*.yml
"""


def select_template(tech: ProjectTechnology) -> str:
    """
    Picks the fallback template for a detected project. Unknown languages
    get the generic Node.js template.
    """
    language = tech.language
    if language in ("javascript", "typescript"):
        if tech.build_tool == "vite" or tech.framework in ("react", "vue"):
            return VITE_TEMPLATE
        if tech.has_build_script:
            return NODE_BUILD_TEMPLATE
        return NODE_TEMPLATE
    if language == "python":
        return PYTHON_TEMPLATE
    if language == "go":
        return GO_TEMPLATE
    if language == "java":
        return JAVA_GRADLE_TEMPLATE if tech.package_manager == "gradle" else JAVA_MAVEN_TEMPLATE
    if language == "rust":
        return RUST_TEMPLATE
    if language == "php":
        return PHP_LARAVEL_TEMPLATE if tech.framework == "laravel" else PHP_TEMPLATE
    if language == "ruby":
        return RUBY_RAILS_TEMPLATE if tech.framework == "rails" else RUBY_TEMPLATE
    return NODE_TEMPLATE


def render_fallback_dockerfile(tech: ProjectTechnology, ignore_comments: bool = False) -> str:
    """
    Renders the fallback Dockerfile for ``tech``.

    :param tech: The detected project technology.
    :param ignore_comments: Leave out explanatory comments.
    """
    def comment(text: str) -> str:
        return "" if ignore_comments else f"# {text}\n"

    return _env.from_string(select_template(tech)).render(comment=comment)
