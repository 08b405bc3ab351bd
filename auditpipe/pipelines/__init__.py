# SPDX-License-Identifier: Apache-2.0
#
# The RepoAudit software is licensed under the Apache License version 2.0.
# Data generated with RepoAudit is provided as-is without warranties.
#
# You may not use this software except in compliance with the License.
# You may obtain a copy of the License at: http://apache.org/licenses/LICENSE-2.0
# Unless required by applicable law or agreed to in writing, software distributed
# under the License is distributed on an "AS IS" BASIS, WITHOUT WARRANTIES OR
# CONDITIONS OF ANY KIND, either express or implied. See the License for the
# specific language governing permissions and limitations under the License.
#
# Data Generated with RepoAudit is provided on an "AS IS" BASIS, WITHOUT WARRANTIES
# OR CONDITIONS OF ANY KIND, either express or implied. No content created from
# RepoAudit should be considered or used as legal advice. Consult an Attorney
# for any legal advice.
#
# RepoAudit is a dependency license auditing tool for source repositories.

import logging
import traceback
from datetime import datetime
from datetime import timezone
from timeit import default_timer as timer

module_logger = logging.getLogger(__name__)


class PipelineDefinition:
    """
    Encapsulate the code related to a Pipeline definition:
    - Steps
    - Final steps, always executed
    """

    @classmethod
    def steps(cls):
        raise NotImplementedError

    @classmethod
    def get_steps(cls):
        """Return the tuple of steps defined in the ``steps`` class method."""
        if not callable(cls.steps):
            raise TypeError("Use a ``steps(cls)`` classmethod to declare the steps.")
        return tuple(cls.steps())

    @classmethod
    def get_final_steps(cls):
        """
        Return a tuple of steps executed once the pipeline execution is over,
        whether the ``steps`` completed or failed.
        """
        return ()


class PipelineRun:
    """
    Encapsulate the code related to a Pipeline run (execution):
    - Execution logic
    - Logging
    - Failure capture
    """

    def __init__(self):
        self.pipeline_class = self.__class__
        self.pipeline_name = self.__class__.__name__
        self.execution_log = []
        self.failure = None

    def append_to_log(self, message):
        self.execution_log.append(message)

    def log(self, message):
        """Log the given `message` to the current module logger and execution_log."""
        now_local = datetime.now(timezone.utc).astimezone()
        timestamp = now_local.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        message = f"{timestamp} {message}"
        module_logger.info(message)
        self.append_to_log(message)

    @staticmethod
    def output_from_exception(exception):
        """Return a formatted error message including the traceback."""
        output = f"{exception}\n\n"

        if exception.__cause__ and str(exception.__cause__) != str(exception):
            output += f"Cause: {exception.__cause__}\n\n"

        traceback_formatted = "".join(traceback.format_tb(exception.__traceback__))
        output += f"Traceback:\n{traceback_formatted}"

        return output

    def execute(self):
        """
        Execute each steps in the order defined on this pipeline class.
        The execution stops at the first step raising an exception.
        The final steps are always executed.

        Return an ``(exitcode, output)`` tuple.
        """
        self.log(f"Pipeline [{self.pipeline_name}] starting")
        pipeline_start_time = timer()

        try:
            exitcode, output = self.execute_steps(self.pipeline_class.get_steps())
        finally:
            self.execute_final_steps()

        if not exitcode:
            pipeline_run_time = timer() - pipeline_start_time
            self.log(f"Pipeline completed in {humanize_time(pipeline_run_time)}")

        return exitcode, output

    def execute_steps(self, steps):
        for step in steps:
            step_name = step.__name__
            self.log(f"Step [{step_name}] starting")
            step_start_time = timer()

            try:
                step(self)
            except Exception as exception:
                self.failure = exception
                self.log(f"Step [{step_name}] failed: {exception}")
                self.log("Pipeline failed")
                return 1, self.output_from_exception(exception)

            step_run_time = timer() - step_start_time
            self.log(f"Step [{step_name}] completed in {humanize_time(step_run_time)}")

        return 0, ""

    def execute_final_steps(self):
        """Execute the final steps; a failure is logged and does not stop the others."""
        for step in self.pipeline_class.get_final_steps():
            try:
                step(self)
            except Exception as exception:
                module_logger.exception(f"Final step [{step.__name__}] failed")
                self.log(f"Final step [{step.__name__}] failed: {exception}")


class BasePipeline(PipelineDefinition, PipelineRun):
    """
    Base class for all pipeline implementations.
    It combines the pipeline definition and execution logics.
    """


def humanize_time(seconds):
    """Convert the provided ``seconds`` number into human-readable time."""
    message = f"{seconds:.0f} seconds"

    if seconds > 86400:
        message += f" ({seconds / 86400:.1f} days)"
    if seconds > 3600:
        message += f" ({seconds / 3600:.1f} hours)"
    elif seconds > 60:
        message += f" ({seconds / 60:.1f} minutes)"

    return message
