from pyooziejob.job import OozieJob, OOZIE_PORT
from pyooziejob.webhdfs import HTTPFS_PORT
from pyooziejob.client import parse_host
import argparse
import json
import time
import sys
import os

TERMINAL_STATES = ['SUCCEEDED','KILLED','FAILED']

def make_job(args):
   oozie = parse_host(args.oozie,OOZIE_PORT)
   httpfs = parse_host(args.httpfs,HTTPFS_PORT)
   client = OozieJob(
      oozie_host=oozie[0],
      oozie_port=oozie[1],
      httpfs_host=httpfs[0],
      httpfs_port=httpfs[1],
      httpfs_user=args.httpfs_user,
      secure=args.secure,
      username=args.user[0],
      password=args.user[1],
      strict=args.strict)
   client.proxies = args.proxies
   client.verify = args.verify
   client.progress = args.progress
   if args.verbose:
      client.enable_verbose()
   return client

def add_job_arguments(cmdparser):
   cmdparser.add_argument(
      '-p','--property',
      dest='property',
      action='append',
      metavar=('name','value'),
      nargs=2,
      help="A property name/value pair")
   cmdparser.add_argument(
      '-P','--properties',
      dest='properties',
      action='append',
      nargs=1,
      metavar=('file.json'),
      help="Property name/value pairs in JSON format.")
   cmdparser.add_argument(
      '-x','--xml',
      dest='xml',
      nargs=1,
      metavar=('file.xml or xml'),
      help="The job configuration as an XML file or literal XML")
   cmdparser.add_argument(
      '-r','--root',
      dest='root',
      nargs=1,
      metavar=('path'),
      help="The HDFS directory the attached files are copied into")
   cmdparser.add_argument(
      'files',
      nargs='*',
      help='Local files to stage before submission')

def configure_job(client,args):
   if args.xml is not None:
      if args.property is not None or args.properties is not None:
         raise ValueError('XML configuration cannot be combined with property name/value pairs.')
      client.properties = args.xml[0]
   else:
      properties = {}
      if args.properties is not None:
         for propfile in args.properties:
            with open(propfile[0]) as propfilein:
               data = json.load(propfilein)
               for name in data:
                  properties[name] = data[name]
      if args.property is not None:
         for prop in args.property:
            properties[prop[0]] = prop[1]
      client.use_mapping(properties)
   root = args.root[0] if args.root is not None else os.environ.get('OOZIE_PROJECT_ROOT')
   if root is not None:
      client.oozie_project_root = root
   client.add_files(*args.files)

def wait_for(client,jobid,interval=5.0):
   while True:
      status = client.status(jobid)
      if client.progress:
         sys.stderr.write('{}\t{}\n'.format(jobid,status))
      if status in TERMINAL_STATES:
         return status
      time.sleep(interval)

def submit_command(client,argv):
   cmdparser = argparse.ArgumentParser(prog='pyooziejob submit',description='submit a job without starting it')
   add_job_arguments(cmdparser)
   args = cmdparser.parse_args(argv)
   configure_job(client,args)
   print(client.submit())

def run_command(client,argv):
   cmdparser = argparse.ArgumentParser(prog='pyooziejob run',description='submit and start a job')
   add_job_arguments(cmdparser)
   cmdparser.add_argument(
      '-w','--wait',
      action='store_true',
      dest='wait',
      default=False,
      help="Wait until the job has finished")
   cmdparser.add_argument(
      '--interval',
      type=float,
      default=5.0,
      dest='interval',
      help="Seconds between status requests while waiting")
   args = cmdparser.parse_args(argv)
   configure_job(client,args)
   jobid = client.run()
   print(jobid)
   if args.wait:
      status = wait_for(client,jobid,interval=args.interval)
      print('{}\t{}'.format(jobid,status))
      if status!='SUCCEEDED':
         sys.exit(1)

def start_command(client,argv):
   cmdparser = argparse.ArgumentParser(prog='pyooziejob start',description='start submitted jobs')
   cmdparser.add_argument(
      'jobids',
      nargs='+',
      help='a list job ids')
   args = cmdparser.parse_args(argv)
   for jobid in args.jobids:
      client.start(jobid)

def status_command(client,argv):
   cmdparser = argparse.ArgumentParser(prog='pyooziejob status',description='job status')
   cmdparser.add_argument(
      '--raw',
      action='store_true',
      dest='raw',
      default=False,
      help="return raw JSON")
   cmdparser.add_argument(
      'jobids',
      nargs='+',
      help='a list job ids')
   args = cmdparser.parse_args(argv)
   for jobid in args.jobids:
      if args.raw:
         print(json.dumps(client.info(jobid)))
      else:
         print('{}\t{}'.format(jobid,client.status(jobid)))

commands = {
   'submit' : submit_command,
   'run' : run_command,
   'start' : start_command,
   'status' : status_command
}
